"""
Provisioning of the disposable examples database.

Every build drops and recreates the database, makes sure the login roles
exist, then applies the baseline and supplementary seed SQL through psql.
"""

import logging
from typing import Optional, Sequence

from exampledocs.database.seed import SUPPLEMENTARY_SQL
from exampledocs.errors import ProcessFailure
from exampledocs.process import ProcessRunner
from exampledocs.schemas import SeedPayloads

logger = logging.getLogger(__name__)

# stderr fragments psql emits when a role or grant is already in place
ALREADY_PRESENT_MARKERS = ("already exists", "is already a member")

PSQL_FLAGS = ["-X", "-q", "-v", "ON_ERROR_STOP=1", "--single-transaction"]


def quote_ident(name: str) -> str:
    """Quote a PostgreSQL identifier."""
    return '"' + name.replace('"', '""') + '"'


class DatabaseProvisioner:
    """Tear down, recreate and seed the examples database."""

    def __init__(
        self,
        runner: ProcessRunner,
        database_name: str,
        owner_role: str,
        authenticator_role: str,
        visitor_role: str,
        maintenance_database: str = "template1",
    ):
        """
        Initialize the provisioner.

        Args:
            runner: Runner used for every dropdb/createdb/psql invocation
            database_name: Name of the disposable database
            owner_role: Login role that owns the database
            authenticator_role: Login role used by clients
            visitor_role: Role granted to the authenticator
            maintenance_database: Database psql connects to for role setup
        """
        self.runner = runner
        self.database_name = database_name
        self.owner_role = owner_role
        self.authenticator_role = authenticator_role
        self.visitor_role = visitor_role
        self.maintenance_database = maintenance_database

    async def provision(self, payloads: SeedPayloads) -> None:
        """
        Produce a freshly seeded database.

        Args:
            payloads: Baseline schema and data SQL

        Raises:
            ProcessFailure: If dropdb, createdb or any seed step fails, or a
                role step fails for a reason other than the target
                already being in the desired state
        """
        logger.info(f"Provisioning database {self.database_name}")

        await self.runner.run("dropdb", ["--if-exists", self.database_name])

        for statement in self.role_statements():
            await self.ensure(
                statement,
                "psql",
                [*PSQL_FLAGS, "-d", self.maintenance_database],
                ALREADY_PRESENT_MARKERS,
                input=statement,
            )

        await self.runner.run("createdb", ["--owner", self.owner_role, self.database_name])

        await self.apply_sql(payloads.schema_sql + "\n" + payloads.data_sql)
        await self.apply_sql(SUPPLEMENTARY_SQL)

        logger.info(f"Database {self.database_name} is ready")

    def role_statements(self) -> Sequence[str]:
        """Statements run independently to make sure the roles exist."""
        owner = quote_ident(self.owner_role)
        authenticator = quote_ident(self.authenticator_role)
        visitor = quote_ident(self.visitor_role)
        return [
            f"create role {owner} with login;",
            f"create role {authenticator} with login noinherit;",
            f"create role {visitor};",
            f"grant {visitor} to {authenticator};",
        ]

    async def apply_sql(self, sql: str) -> None:
        """Run SQL against the examples database, aborting on the first error."""
        await self.runner.run("psql", [*PSQL_FLAGS, "-d", self.database_name], input=sql)

    async def ensure(
        self,
        description: str,
        command: str,
        args: Sequence[str],
        markers: Sequence[str],
        input: Optional[str] = None,
    ) -> bool:
        """
        Run a step whose failure is acceptable when the target is already in state.

        Args:
            description: Human-readable step name for logging
            command: Executable to run
            args: Arguments for the executable
            markers: Lowercase stderr fragments meaning "already in desired state"
            input: Optional stdin text

        Returns:
            True if the step changed something, False if it was already satisfied

        Raises:
            ProcessFailure: If the failure does not match any marker
        """
        try:
            await self.runner.run(command, args, input=input)
        except ProcessFailure as e:
            stderr = e.stderr.lower()
            if e.code is not None and any(marker in stderr for marker in markers):
                logger.debug(f"Already satisfied: {description}")
                return False
            raise
        return True

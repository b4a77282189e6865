"""
Seed data for the disposable examples database.

The baseline schema and data are downloaded once per build. The supplementary
fragment adds the tables and columns that individual examples rely on and is
applied after the baseline.
"""

import logging
from typing import Optional

import httpx

from exampledocs.errors import SeedFetchError
from exampledocs.schemas import SeedPayloads

logger = logging.getLogger(__name__)


SUPPLEMENTARY_SQL = """
create schema if not exists app_public;

create table if not exists app_public.tags (
  id serial primary key,
  name text not null unique,
  created_at timestamptz not null default now()
);

create table if not exists app_public.products (
  id serial primary key,
  name text not null,
  price numeric(10, 2) not null check (price >= 0),
  attributes jsonb not null default '{}'::jsonb,
  tag_ids int[] not null default '{}'
);

create table if not exists app_public.product_reviews (
  id serial primary key,
  product_id int not null references app_public.products on delete cascade,
  rating int not null check (rating between 1 and 5),
  body text
);

create index if not exists product_reviews_product_id_idx
  on app_public.product_reviews (product_id);

comment on table app_public.product_reviews is 'Reviews left by customers on a product.';

insert into app_public.tags (name) values
  ('hardware'),
  ('software'),
  ('books')
on conflict (name) do nothing;

insert into app_public.products (name, price, attributes, tag_ids) values
  ('Keyboard', 49.99, '{"layout": "ansi", "wireless": true}', '{1}'),
  ('Editor licence', 120.00, '{"seats": 5}', '{2}'),
  ('SQL cookbook', 35.50, '{"pages": 412}', '{3}');

insert into app_public.product_reviews (product_id, rating, body) values
  (1, 5, 'Quiet and responsive.'),
  (1, 3, null),
  (3, 4, 'Good recipes for window functions.');
"""


async def fetch_seed_payloads(
    schema_url: str,
    data_url: str,
    client: Optional[httpx.AsyncClient] = None,
) -> SeedPayloads:
    """
    Download the baseline schema and seed data.

    Args:
        schema_url: URL of the baseline schema SQL
        data_url: URL of the baseline data SQL
        client: Optional client to use (default: a fresh AsyncClient)

    Returns:
        SeedPayloads with both texts

    Raises:
        SeedFetchError: If either request fails or returns an error status
    """
    owns_client = client is None
    if owns_client:
        client = httpx.AsyncClient(follow_redirects=True, timeout=30.0)

    try:
        schema_sql = await _fetch_text(client, schema_url)
        data_sql = await _fetch_text(client, data_url)
    finally:
        if owns_client:
            await client.aclose()

    return SeedPayloads(schema_sql=schema_sql, data_sql=data_sql)


async def _fetch_text(client: httpx.AsyncClient, url: str) -> str:
    logger.info(f"Fetching {url}")
    try:
        response = await client.get(url)
        response.raise_for_status()
    except httpx.HTTPError as e:
        raise SeedFetchError(f"Failed to fetch {url}: {e}") from e
    return response.text

"""
Infrastructure Layer (adapters).

- db/: pool de conexiones PostgreSQL instrumentado.
- repositories/: implementaciones Postgres e in-memory de los puertos del dominio.
"""

from protean.domain import Domain
from sqlalchemy import create_engine

_SQL_PROVIDERS = ("sqlite", "postgresql")


def _sql_providers(domain: Domain):
    for name, provider in domain.providers.items():
        if provider.conn_info["provider"] in _SQL_PROVIDERS:
            yield name, provider


def _register_models(domain: Domain, provider_name: str) -> None:
    # Touching the repository's DAO registers the model with SQLAlchemy metadata
    for _, record in domain.registry.aggregates.items():
        if record.cls.meta_.provider == provider_name:
            domain.repository_for(record.cls)._dao  # noqa: B018


def setup_db(domain: Domain) -> list[str]:
    """Create tables for the orders and settings on every SQL provider.

    Returns the names of the providers that were set up. The in-memory
    provider needs no schema and is skipped.
    """
    prepared = []
    with domain.domain_context():
        for name, provider in _sql_providers(domain):
            engine = create_engine(provider.conn_info["database_uri"])
            _register_models(domain, name)
            provider._metadata.create_all(engine)
            prepared.append(name)
    return prepared


def drop_db(domain: Domain) -> list[str]:
    """Drop the tables created by ``setup_db``."""
    dropped = []
    with domain.domain_context():
        for name, provider in _sql_providers(domain):
            engine = create_engine(provider.conn_info["database_uri"])
            _register_models(domain, name)
            provider._metadata.drop_all(engine)
            dropped.append(name)
    return dropped

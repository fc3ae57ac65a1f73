from protean.domain import Domain
from sqlalchemy import create_engine

RELATIONAL_PROVIDERS = ("sqlite", "postgresql")


def _register_models(domain: Domain, provider) -> None:
    # Accessing a repository's DAO builds and registers the element's
    # SQLAlchemy model on the provider's metadata.
    for _, record in domain.registry.aggregates.items():
        if record.cls.meta_.provider == provider.name:
            domain.repository_for(record.cls)._dao  # noqa: B018

    for _, record in domain.registry.entities.items():
        if record.cls.meta_.provider == provider.name:
            domain.repository_for(record.cls)._dao  # noqa: B018


def setup_db(domain: Domain):
    """Create the ledger tables on every relational provider"""
    with domain.domain_context():
        for _, provider in domain.providers.items():
            if provider.conn_info["provider"] in RELATIONAL_PROVIDERS:
                _register_models(domain, provider)
                provider._metadata.create_all(create_engine(provider.conn_info["database_uri"]))


def drop_db(domain: Domain):
    """Drop the ledger tables on every relational provider"""
    with domain.domain_context():
        for _, provider in domain.providers.items():
            if provider.conn_info["provider"] in RELATIONAL_PROVIDERS:
                _register_models(domain, provider)
                provider._metadata.drop_all(create_engine(provider.conn_info["database_uri"]))


def reset_db(domain: Domain):
    """Delete every row in every database the domain uses"""
    with domain.domain_context():
        for _, provider in domain.providers.items():
            provider._data_reset()

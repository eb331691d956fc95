"""Configuration management using Pydantic Settings."""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # Endpoints (comma separated, same format as the web component attribute)
    overview_endpoints: str = Field(
        default="",
        description="Comma separated list of SPARQL endpoint URLs",
    )
    show_metadata: bool = Field(
        default=False,
        description="Also show ontology/SHACL/VoID metadata classes",
    )
    rich_overview: bool = Field(
        default=True,
        description="Multi-select, hide-on-hover and curved parallel edges",
    )

    # Graph construction
    fallback_weight: int = Field(
        default=5,
        description="Row weight used when the statistics row has no triples count",
    )
    default_node_size: float = 10.0
    min_edge_size: float = 2.0
    max_edge_size: float = 8.0

    # Clusters and layout
    palette_seed: str = "topClassesClusters"
    cluster_radius: float = 200.0  # Distance of cluster seeds from the center
    cluster_spread: float = 20.0  # Max random offset of a node around its cluster seed
    layout_seed: int = 42
    layout_iterations: int = 50

    # SPARQL endpoint access
    sparql_timeout: float = 60.0
    sparql_max_concurrent: int = 4

    # API Configuration
    api_host: str = "0.0.0.0"
    api_port: int = 8000
    api_debug: bool = False

    @property
    def endpoint_list(self) -> list[str]:
        """Configured endpoints, stripped, empty entries removed."""
        return [e.strip() for e in self.overview_endpoints.split(",") if e.strip()]


def get_dev_settings() -> Settings:
    """Get development environment settings."""
    return Settings(
        overview_endpoints="https://sparql.uniprot.org/sparql/",
        api_debug=True,
    )


def get_test_settings() -> Settings:
    """Get test environment settings."""
    return Settings(
        overview_endpoints="https://example.org/sparql",
        layout_iterations=5,
        sparql_timeout=5.0,
    )


# Global settings instance
settings = Settings()

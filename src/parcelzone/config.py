"""parcelzone configuration — upstream endpoints, dataset layout, and runtime settings."""

from pydantic import model_validator
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # Geocoding (Nominatim / OpenStreetMap). The public instance requires a
    # distinct User-Agent per application and allows ~1 req/sec.
    nominatim_url: str = "https://nominatim.openstreetmap.org/search"
    geocoder_user_agent: str = "parcelzone/1.0"

    # DataSF (Socrata SODA) datasets
    parcels_url: str = "https://data.sfgov.org/resource/acdm-wktn.json"
    zoning_url: str = "https://data.sfgov.org/resource/8br2-hhp3.json"
    height_bulk_url: str = "https://data.sfgov.org/resource/gc9v-7i5s.json"

    parcels_geometry_column: str = "shape"
    zoning_geometry_column: str = "shape"
    height_bulk_geometry_column: str = "shape"

    # Optional — raises the Socrata throttling limit, not required
    socrata_app_token: str = ""

    # Per-call timeouts (seconds). No retries.
    geocode_timeout: float = 10.0
    dataset_timeout: float = 15.0

    # Override for the packaged zoning_rules.json
    rules_catalog_path: str = ""

    @model_validator(mode="after")
    def _strip_credentials(self) -> "Settings":
        """Strip whitespace/newlines from header values — common paste error in dashboards."""
        for field in ("socrata_app_token", "geocoder_user_agent"):
            val = getattr(self, field)
            if val and val != val.strip():
                setattr(self, field, val.strip())
        return self

    # MLflow tracing
    mlflow_tracking_uri: str = "sqlite:///mlruns/mlflow.db"
    mlflow_experiment_name: str = "parcelzone"

    # Logging
    log_json: bool = True
    log_level: str = "INFO"

    # CORS
    cors_origins: list[str] = ["http://localhost:3000"]

    model_config = {"env_file": ".env", "extra": "ignore"}


settings = Settings()

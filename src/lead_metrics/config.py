"""Settings for the remote backend, table names and field labels."""

import os
from pathlib import Path
from typing import Mapping, Optional

try:
    import yaml
except ModuleNotFoundError as e:
    raise ModuleNotFoundError(
        "PyYAML is required for settings loading. Run: poetry install"
    ) from e
from pydantic import BaseModel, Field

from lead_metrics.errors import ConfigurationError

DEFAULT_API_URL = "https://api.airtable.com/v0"
CONFIG_ENV_VAR = "LEAD_METRICS_CONFIG"


class TableNames(BaseModel):
    """Remote table (collection) names."""

    leads: str = "Leads"
    employees: str = "Employee Directory"
    departments: str = "Departments"
    products: str = "Products"


class FieldLabels(BaseModel):
    """Field labels as they appear in the remote tables."""

    assigned: str = "Assigned To"
    name: str = "Full Name"
    photo: str = "Profile Photo"
    department_link: str = "Department"
    department_name: str = "Department Name"
    stage: str = "Stage"

    product_name: str = "product_name"
    description: str = "description"
    cost_price: str = "cost_price"
    selling_price: str = "selling_price"
    profit_per_sale: str = "profit_per_sale"
    images: str = "product_images"


def _default_stages() -> dict[str, str]:
    return {
        "fresh": "Fresh",
        "follow": "Follow Up Required",
        "not_conn": "Not Connected",
    }


class Settings(BaseModel):
    """
    Explicit configuration passed to connectors and pipelines.
    Build it once (from_env / from_yaml / load), call validate_required(),
    and hand it down; nothing else reads the environment.
    """

    api_key: str = ""
    base_id: str = ""
    products_base_id: Optional[str] = None
    api_url: str = DEFAULT_API_URL
    timeout: float = Field(default=30.0, gt=0)
    request_interval: float = Field(
        default=0.2,
        ge=0,
        description="Minimum seconds between requests (backend allows 5 req/s)",
    )
    page_size: Optional[int] = Field(default=None, ge=1, le=100)

    tables: TableNames = Field(default_factory=TableNames)
    fields: FieldLabels = Field(default_factory=FieldLabels)
    stages: dict[str, str] = Field(
        default_factory=_default_stages,
        description="Category key -> exact stage label; order is display order",
    )
    target_department: str = "Sales & Customer Success"

    @property
    def effective_products_base_id(self) -> str:
        return self.products_base_id or self.base_id

    def validate_required(self, require_credentials: bool = True) -> "Settings":
        """
        Raise ConfigurationError naming every empty required value.
        require_credentials=False skips the connection values (api_key, base_id,
        api_url), for runs against a connector that does not need them.
        """
        missing: list[str] = []
        if require_credentials:
            missing.extend(self.missing_credentials())
        for name, value in self.tables.model_dump().items():
            if not str(value).strip():
                missing.append(f"tables.{name}")
        for name, value in self.fields.model_dump().items():
            if not str(value).strip():
                missing.append(f"fields.{name}")
        if not self.stages:
            missing.append("stages")
        for key, label in self.stages.items():
            if not str(label).strip():
                missing.append(f"stages.{key}")
        if not self.target_department.strip():
            missing.append("target_department")
        if missing:
            raise ConfigurationError(missing)
        return self

    def missing_credentials(self) -> list[str]:
        return [
            name
            for name in ("api_key", "base_id", "api_url")
            if not getattr(self, name).strip()
        ]

    def masked(self) -> dict:
        """Settings as a dict with the credential hidden, for display."""
        data = self.model_dump(mode="json")
        if data.get("api_key"):
            data["api_key"] = data["api_key"][:3] + "***"
        return data

    @classmethod
    def from_yaml(cls, path: str | Path) -> "Settings":
        """Load settings from YAML. Supports a nested `airtable:` section or flat keys."""
        data = yaml.safe_load(Path(path).read_text()) or {}
        return cls.model_validate(_flatten(data))

    @classmethod
    def from_env(
        cls,
        environ: Optional[Mapping[str, str]] = None,
        base: Optional["Settings"] = None,
    ) -> "Settings":
        """Overlay environment variables on base (or defaults)."""
        env = os.environ if environ is None else environ
        settings = base or cls()
        update: dict = {}
        tables: dict = {}
        fields: dict = {}

        api_key = env.get("AIRTABLE_API_KEY") or env.get("AIRTABLE_TOKEN")
        if api_key:
            update["api_key"] = api_key
        for var, key in (
            ("AIRTABLE_BASE_ID", "base_id"),
            ("AIRTABLE_PRODUCTS_BASE_ID", "products_base_id"),
            ("AIRTABLE_API_URL", "api_url"),
            ("LEAD_METRICS_DEPARTMENT", "target_department"),
        ):
            if env.get(var):
                update[key] = env[var]
        if env.get("AIRTABLE_LEADS_TABLE"):
            tables["leads"] = env["AIRTABLE_LEADS_TABLE"]
        if env.get("AIRTABLE_PRODUCTS_TABLE"):
            tables["products"] = env["AIRTABLE_PRODUCTS_TABLE"]
        if env.get("AIRTABLE_ASSIGNED_FIELD"):
            fields["assigned"] = env["AIRTABLE_ASSIGNED_FIELD"]

        if tables:
            update["tables"] = settings.tables.model_copy(update=tables)
        if fields:
            update["fields"] = settings.fields.model_copy(update=fields)
        return settings.model_copy(update=update)

    @classmethod
    def load(
        cls,
        config_path: Optional[str | Path] = None,
        environ: Optional[Mapping[str, str]] = None,
    ) -> "Settings":
        """YAML file (explicit path or LEAD_METRICS_CONFIG) with env overrides on top."""
        env = os.environ if environ is None else environ
        path = config_path or env.get(CONFIG_ENV_VAR)
        base = cls.from_yaml(path) if path else cls()
        return cls.from_env(env, base=base)


def _flatten(data: dict) -> dict:
    """Accept `airtable:` connection keys nested or at top level."""
    flat = dict(data)
    nested = flat.pop("airtable", None) or {}
    for key in (
        "api_key",
        "base_id",
        "products_base_id",
        "api_url",
        "timeout",
        "request_interval",
        "page_size",
    ):
        if key in nested and key not in flat:
            flat[key] = nested[key]
    return flat

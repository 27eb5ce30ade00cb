"""Credential resolution result model."""

from dataclasses import dataclass, field


@dataclass
class ResolvedCredentials:
    form: dict[str, str] = field(default_factory=dict)  # outbound token form, credentials injected
    secret_source: str = ""  # "map" | "fallback" | "request" | "" (none)

    @property
    def client_id(self) -> str:
        return self.form.get("client_id", "")

    @property
    def complete(self) -> bool:
        return bool(self.form.get("client_id")) and bool(self.form.get("client_secret"))

"""Runtime configuration for the inspector, echo server and client."""

import os
from dataclasses import dataclass
from pathlib import Path


def _env_flag(name: str, default: str = "0") -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes", "on")


@dataclass
class InspectConfig:
    keystore_dir: Path = Path("certs")
    password: str = "changeit"
    host: str = "localhost"
    port: int = 8443
    verbose: bool = False

    @classmethod
    def from_env(cls) -> "InspectConfig":
        """Load config from environment variables with sensible defaults."""
        return cls(
            keystore_dir=Path(os.getenv("CERTINSPECT_KEYSTORE_DIR", "certs")),
            password=os.getenv("CERTINSPECT_PASSWORD", "changeit"),
            host=os.getenv("CERTINSPECT_HOST", "localhost"),
            port=int(os.getenv("CERTINSPECT_PORT", "8443")),
            verbose=_env_flag("CERTINSPECT_VERBOSE"),
        )

    @property
    def server_keystore(self) -> Path:
        return self.keystore_dir / "server.p12"

    @property
    def client_keystore(self) -> Path:
        return self.keystore_dir / "client.p12"

    @property
    def truststore(self) -> Path:
        return self.keystore_dir / "truststore.p12"

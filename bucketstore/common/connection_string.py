from __future__ import annotations

from dataclasses import dataclass

DEFAULT_BUCKET = "storage"

_KEY_ALIASES: dict[str, str] = {
    "accesskey": "access_key",
    "accesskeyid": "access_key",
    "id": "access_key",
    "secretkey": "secret_key",
    "secret": "secret_key",
    "region": "region",
    "endpoint": "endpoint",
    "bucket": "bucket",
}


def _canonical_key(key: str) -> str:
    return "".join(key.split()).lower()


@dataclass
class ConnectionString:
    """Parses and renders ``Key=Value;`` object store connection strings.

    Keys are case-insensitive and may contain spaces, e.g. ``Access Key ID``.
    """

    access_key: str | None = None
    secret_key: str | None = None
    region: str | None = None
    endpoint: str | None = None
    _bucket: str | None = None

    @property
    def bucket(self) -> str:
        return self._bucket or DEFAULT_BUCKET

    @bucket.setter
    def bucket(self, value: str | None) -> None:
        self._bucket = value

    @property
    def secure(self) -> bool:
        return (self.endpoint or "").lower().startswith("https://")

    @property
    def endpoint_url(self) -> str | None:
        """Endpoint with an explicit scheme, defaulting to plain http."""
        if not self.endpoint:
            return None
        lowered = self.endpoint.lower()
        if lowered.startswith("http://") or lowered.startswith("https://"):
            return self.endpoint
        return f"http://{self.endpoint}"

    @classmethod
    def parse(cls, connection_string: str) -> "ConnectionString":
        if not connection_string:
            raise ValueError("connection_string is required")

        result = cls()
        for item in connection_string.split(";"):
            if not item.strip():
                continue
            if "=" not in item:
                raise ValueError(
                    f"The option '{item.strip()}' cannot be recognized in connection string."
                )
            key, value = item.split("=", 1)
            attr = _KEY_ALIASES.get(_canonical_key(key))
            if attr is None:
                raise ValueError(
                    f"The option '{key.strip()}' cannot be recognized in connection string."
                )
            setattr(result, attr, value.strip())
        return result

    def __str__(self) -> str:
        parts = []
        if self.access_key:
            parts.append(f"AccessKey={self.access_key};")
        if self.secret_key:
            parts.append(f"SecretKey={self.secret_key};")
        if self.region:
            parts.append(f"Region={self.region};")
        if self.endpoint:
            parts.append(f"EndPoint={self.endpoint};")
        if self._bucket:
            parts.append(f"Bucket={self._bucket};")
        return "".join(parts)

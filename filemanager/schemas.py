import hashlib
from enum import Enum

from pydantic import BaseModel, Field, field_validator


class PathKind(str, Enum):
    FILE = "file"
    DIRECTORY = "directory"


class ValidationRequest(BaseModel):
    path: str
    kind: PathKind = PathKind.FILE
    check_existence: bool = False
    check_non_existence: bool = False


class Settings(BaseModel):
    chunk_size: int = Field(64 * 1024, ge=1, description="Streaming read size in bytes")
    hash_algorithm: str = Field("sha256", description="hashlib algorithm used by `hash`")
    compression_quality: int = Field(11, ge=0, le=11, description="Brotli quality")
    prompt: str = "> "
    log_path: str = ""
    log_level: str = "INFO"

    @field_validator("hash_algorithm")
    @classmethod
    def _known_algorithm(cls, value: str) -> str:
        name = value.lower()
        # variable-length digests (shake_*) need a length and cannot back `hash`
        if name not in hashlib.algorithms_available or hashlib.new(name).digest_size == 0:
            raise ValueError(f"unsupported hash algorithm: {value}")
        return name

    @field_validator("log_level")
    @classmethod
    def _upper_level(cls, value: str) -> str:
        return value.upper()

from dataclasses import dataclass


@dataclass
class ValidationError:
    level: str  # e.g. "ingestion"
    message: str
    object_id: str

    def to_dict(self) -> dict:
        return {
            "level": self.level,
            "message": self.message,
            "object_id": self.object_id,
        }

from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Tuple


@dataclass(frozen=True)
class Job:
    # One delivery job as received from email.queue
    request_id: str
    user_id: str
    notification_type: str
    message_data: Dict[str, Any] = field(default_factory=dict)
    retry_count: int = 0
    channel_priority: Optional[str] = None
    metadata: Dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class EmailTemplate:
    template_key: str
    subject_template: str
    body_template: str
    required_variables: Tuple[str, ...] = ()
    content_type: str = "text/html"

    @classmethod
    def from_dict(cls, data: dict) -> "EmailTemplate":
        # Template service stores subject/body, older payloads use *_template
        required = data.get("required_variables") or ()
        if isinstance(required, str):
            required = (required,)
        return cls(
            template_key=data.get("template_key") or data.get("template_code", ""),
            subject_template=data.get("subject_template", data.get("subject", "")),
            body_template=data.get("body_template", data.get("body", "")),
            required_variables=tuple(required),
            content_type=data.get("content_type", "text/html"),
        )

    def to_dict(self) -> dict:
        return {
            "template_key": self.template_key,
            "subject_template": self.subject_template,
            "body_template": self.body_template,
            "required_variables": list(self.required_variables),
            "content_type": self.content_type,
        }


@dataclass(frozen=True)
class UserProfile:
    user_id: str
    email: Optional[str]
    name: str = ""

    @classmethod
    def from_dict(cls, data: dict) -> "UserProfile":
        return cls(
            user_id=str(data.get("user_id", "")),
            email=data.get("email"),
            name=data.get("name") or "",
        )

    def to_dict(self) -> dict:
        return {"user_id": self.user_id, "email": self.email, "name": self.name}


@dataclass(frozen=True)
class Success:
    message_id: str
    success = True

    def as_dict(self) -> dict:
        return {"success": True, "message_id": self.message_id}


@dataclass(frozen=True)
class Failure:
    error: str
    success = False

    def as_dict(self) -> dict:
        return {"success": False, "error": self.error}

"""
Request shapes decoded from the browser forms and the relay response builders
"""
from dataclasses import dataclass, fields
from datetime import datetime
from typing import Any, Dict, Optional
from urllib.parse import urlsplit

from werkzeug.exceptions import BadRequest

from wa_relay.masking import mask_request_body

CHAT_ID_SUFFIX = "@c.us"
MIN_PHONE_LENGTH = 11


@dataclass
class CredentialsRequest:
    idInstance: str = ""
    apiTokenInstance: str = ""

    @classmethod
    def from_json(cls, data: Optional[Any]):
        """Decode a JSON object; missing fields default to "" like the form does"""
        if not isinstance(data, dict):
            raise BadRequest("Invalid request body")
        values = {}
        for field in fields(cls):
            value = data.get(field.name)
            if value is None:
                continue
            if not isinstance(value, str):
                raise BadRequest("Invalid request body")
            values[field.name] = value
        return cls(**values)

    def echo(self) -> Dict[str, Any]:
        return {"idInstance": self.idInstance}


@dataclass
class SendMessageRequest(CredentialsRequest):
    phoneNumber: str = ""
    messageText: str = ""

    def validate(self):
        validate_phone(self.phoneNumber)

    @property
    def chat_id(self) -> str:
        return f"{self.phoneNumber}{CHAT_ID_SUFFIX}"

    def payload(self) -> Dict[str, Any]:
        return {"chatId": self.chat_id, "message": self.messageText}

    def echo(self) -> Dict[str, Any]:
        return {
            "phoneNumber": self.phoneNumber,
            "message": self.messageText,
            "idInstance": self.idInstance,
        }


@dataclass
class SendFileRequest(CredentialsRequest):
    phoneNumber: str = ""
    fileUrl: str = ""

    def validate(self):
        validate_phone(self.phoneNumber)
        if self.fileUrl == "":
            raise BadRequest("File URL is required")
        if not is_absolute_url(self.fileUrl):
            raise BadRequest("Invalid file URL")

    @property
    def chat_id(self) -> str:
        return f"{self.phoneNumber}{CHAT_ID_SUFFIX}"

    def payload(self) -> Dict[str, Any]:
        return {
            "chatId": self.chat_id,
            "urlFile": self.fileUrl,
            "fileName": get_filename(self.fileUrl),
        }

    def echo(self) -> Dict[str, Any]:
        return {
            "phoneNumber": self.phoneNumber,
            "fileUrl": self.fileUrl,
            "idInstance": self.idInstance,
        }


def validate_phone(phone: str):
    if len(phone) < MIN_PHONE_LENGTH:
        raise BadRequest("Phone number too short")


def is_absolute_url(url: str) -> bool:
    try:
        parts = urlsplit(url)
    except ValueError:
        return False
    return bool(parts.scheme and parts.netloc)


def get_filename(url: str) -> str:
    """Last non-empty path segment of a URL, ignoring query and fragment"""
    clean_url = url.split("?")[0]
    clean_url = clean_url.split("#")[0]

    for part in reversed(clean_url.split("/")):
        if part:
            return part
    return ""


def now_rfc3339() -> str:
    return datetime.now().astimezone().isoformat(timespec="seconds")


def format_duration(seconds: float) -> str:
    """Human duration: 850us, 312.5ms, 1.204s"""
    if seconds < 0.001:
        return f"{seconds * 1_000_000:.0f}µs"
    if seconds < 1:
        return f"{seconds * 1000:.1f}ms"
    return f"{seconds:.3f}s"


def settings_response(url: str, api_response: Dict[str, Any]) -> Dict[str, Any]:
    return {
        "url": url,
        "response": api_response,
        "status": 200,
        "time": now_rfc3339(),
    }


def relay_response(url: str, request_data: CredentialsRequest, api_response: Dict[str, Any],
                   status_code: int, elapsed: float) -> Dict[str, Any]:
    return {
        "url": url,
        "requestBody": mask_request_body(request_data.echo()),
        "response": api_response,
        "statusCode": status_code,
        "processedAt": now_rfc3339(),
        "requestTime": format_duration(elapsed),
    }

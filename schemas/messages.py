import json
from typing import Annotated, Any, Dict, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, ValidationError

INVALID_JSON = "invalid JSON"
UNRECOGNIZED_MESSAGE = "unrecognized message"
NOT_PAIRED = "not paired"
QUEUE_TIMEOUT = "queue timeout"


class InvalidMessage(ValueError):
    """Inbound frame that could not be turned into a client message."""

    def __init__(self, reason: str):
        super().__init__(reason)
        self.reason = reason


# Inbound: peer -> broker

class ClientMessage(BaseModel):
    model_config = ConfigDict(extra="allow")


class JoinMessage(ClientMessage):
    type: Literal["join"]


class LeaveMessage(ClientMessage):
    type: Literal["leave"]


class OfferMessage(ClientMessage):
    type: Literal["offer"]
    sdp: str


class AnswerMessage(ClientMessage):
    type: Literal["answer"]
    sdp: str


class IceMessage(ClientMessage):
    type: Literal["ice"]
    candidate: Dict[str, Any]


NegotiationMessage = Union[OfferMessage, AnswerMessage, IceMessage]

InboundMessage = Annotated[
    Union[JoinMessage, LeaveMessage, OfferMessage, AnswerMessage, IceMessage],
    Field(discriminator="type"),
]

_inbound_adapter = TypeAdapter(InboundMessage)


def parse_client_message(raw: Union[str, bytes]):
    """Validate one inbound frame and return the matching message model.

    Raises InvalidMessage with the text to report back to the sender.
    """
    if isinstance(raw, (bytes, bytearray)):
        try:
            raw = raw.decode("utf-8")
        except UnicodeDecodeError:
            raise InvalidMessage(INVALID_JSON)
    try:
        data = json.loads(raw)
    except (json.JSONDecodeError, RecursionError):
        raise InvalidMessage(INVALID_JSON)
    if not isinstance(data, dict):
        raise InvalidMessage(UNRECOGNIZED_MESSAGE)
    try:
        return _inbound_adapter.validate_python(data)
    except ValidationError:
        raise InvalidMessage(UNRECOGNIZED_MESSAGE)


# Outbound: broker -> peer

class ServerMessage(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    def to_json(self) -> str:
        return self.model_dump_json(by_alias=True)


class QueuedMessage(ServerMessage):
    type: Literal["queued"] = "queued"


class MatchedMessage(ServerMessage):
    type: Literal["matched"] = "matched"
    role: Literal["offerer", "answerer"]
    peer_id: str = Field(alias="peerId")


class PeerLeftMessage(ServerMessage):
    type: Literal["peer-left"] = "peer-left"


class ErrorMessage(ServerMessage):
    type: Literal["error"] = "error"
    message: str

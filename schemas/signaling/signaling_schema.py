from enum import Enum
from typing import Any, ClassVar, Dict, Literal, Optional, Type
from pydantic import BaseModel, ConfigDict, field_validator
import math

class Role(str, Enum):
  CAMERA = "camera"
  VIEWER = "viewer"

def is_falsy(value: Any) -> bool:
  # null, false, 0, NaN and "" are falsy on the wire; {} and [] are not
  if isinstance(value, float) and math.isnan(value):
    return True
  return value is None or value is False or value == 0 or value == ""

class SignalingMessage(BaseModel):
  type: Any  # 'offer', 'answer', 'ice-candidate' or anything else the clients agree on
  classifies_as: ClassVar[Optional[Role]] = None

  model_config = ConfigDict(extra="allow")

  @field_validator("type")
  @classmethod
  def type_is_present(cls, value):
    if is_falsy(value):
      raise ValueError("missing type")
    return value

class OfferMessage(SignalingMessage):
  type: Literal["offer"]
  offer: Any
  classifies_as: ClassVar[Optional[Role]] = Role.VIEWER

  @field_validator("offer")
  @classmethod
  def offer_is_present(cls, value):
    if is_falsy(value):
      raise ValueError("missing offer data")
    return value

class AnswerMessage(SignalingMessage):
  type: Literal["answer"]
  answer: Any
  classifies_as: ClassVar[Optional[Role]] = Role.CAMERA

  @field_validator("answer")
  @classmethod
  def answer_is_present(cls, value):
    if is_falsy(value):
      raise ValueError("missing answer data")
    return value

class IceCandidateMessage(SignalingMessage):
  # Candidates are relayed as they come, even without a candidate field
  type: Literal["ice-candidate"]
  candidate: Any = None

class UnknownMessage(SignalingMessage):
  pass

MESSAGE_TYPES: Dict[str, Type[SignalingMessage]] = {
  "offer": OfferMessage,
  "answer": AnswerMessage,
  "ice-candidate": IceCandidateMessage,
}

class ViewerCountMessage(BaseModel):
  type: Literal["viewer-count"] = "viewer-count"
  count: int

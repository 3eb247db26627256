"""
Tests for relaying accepted messages and pushing the viewer count.
"""

import json
import logging

from helpers.utils.signaling_relay import SignalingRelay
from helpers.utils.validate_signaling_message import validate_signaling_message
from schemas.signaling.signaling_schema import Role


def accepted(payload, sender_id):
  raw = payload if isinstance(payload, str) else json.dumps(payload)
  validated = validate_signaling_message(raw, sender_id)
  assert validated is not None
  return validated


def add_channels(connections, make_channel, *channel_ids):
  channels = {channel_id: make_channel(channel_id) for channel_id in channel_ids}
  for channel_id, channel in channels.items():
    connections.register(channel_id, channel)
  return channels


def test_relay_reaches_every_other_channel(connections, relay, make_channel):
  channels = add_channels(connections, make_channel, "s", "a", "b", "c")
  message = accepted('{"type": "offer",  "offer": "X"}', "s")

  assert relay.relay("s", message) == 3

  for channel_id in ("a", "b", "c"):
    assert channels[channel_id].sent == ['{"type": "offer",  "offer": "X"}']
  assert channels["s"].sent == []


def test_relay_skips_channels_that_are_not_open(connections, relay, make_channel):
  channels = add_channels(connections, make_channel, "s", "a")
  closing = make_channel("closing", is_open=False)
  connections.register("closing", closing)

  assert relay.relay("s", accepted({"type": "ice-candidate"}, "s")) == 1

  assert len(channels["a"].sent) == 1
  assert closing.sent == []


def test_send_failure_does_not_stop_the_relay(connections, relay, make_channel, caplog):
  channels = add_channels(connections, make_channel, "s", "a", "c")
  connections.register("broken", make_channel("broken", broken=True))

  with caplog.at_level(logging.ERROR):
    recipients = relay.relay("s", accepted({"type": "answer", "answer": "Y"}, "s"))

  assert recipients == 2
  assert len(channels["a"].sent) == 1
  assert len(channels["c"].sent) == 1
  assert "Failed to relay answer to broken" in caplog.text


def test_offer_and_answer_classify_the_sender(connections, relay, make_channel):
  add_channels(connections, make_channel, "cam", "viewer", "other")

  relay.relay("cam", accepted({"type": "answer", "answer": "Y"}, "cam"))
  relay.relay("viewer", accepted({"type": "offer", "offer": "X"}, "viewer"))
  relay.relay("other", accepted({"type": "ice-candidate", "candidate": "c"}, "other"))

  assert connections.role_of("cam") == Role.CAMERA
  assert connections.role_of("viewer") == Role.VIEWER
  assert connections.role_of("other") is None


def test_role_is_not_reassigned_by_opposite_message(connections, relay, make_channel):
  channels = add_channels(connections, make_channel, "cam", "peer")

  relay.relay("cam", accepted({"type": "answer", "answer": "Y"}, "cam"))
  relay.relay("cam", accepted({"type": "offer", "offer": "X"}, "cam"))

  assert connections.role_of("cam") == Role.CAMERA
  # The conflicting message is still relayed
  assert channels["peer"].sent[-1] == json.dumps({"type": "offer", "offer": "X"})


def test_viewer_count_goes_to_cameras_only(connections, relay, make_channel):
  channels = add_channels(connections, make_channel, "cam", "va", "vb")
  connections.classify("cam", Role.CAMERA)
  connections.classify("vb", Role.VIEWER)

  offer = '{"type": "offer", "offer": "X"}'
  relay.relay("va", accepted(offer, "va"))

  assert channels["cam"].sent == [offer, '{"type":"viewer-count","count":2}']
  assert channels["vb"].sent == [offer]


def test_answer_from_camera_sends_no_count_to_viewers(connections, relay, make_channel):
  channels = add_channels(connections, make_channel, "cam", "va", "vb")
  connections.classify("va", Role.VIEWER)
  connections.classify("vb", Role.VIEWER)

  answer = '{"type": "answer", "answer": "Y"}'
  relay.relay("cam", accepted(answer, "cam"))

  assert channels["va"].sent == [answer]
  assert channels["vb"].sent == [answer]
  assert channels["cam"].sent == ['{"type":"viewer-count","count":2}']


def test_viewer_count_skips_cameras_that_are_not_open(connections, relay, make_channel):
  closing_camera = make_channel("cam", is_open=False)
  connections.register("cam", closing_camera)
  connections.classify("cam", Role.CAMERA)

  relay.push_viewer_count()

  assert closing_camera.sent == []


def test_viewer_count_can_be_disabled(connections, make_channel):
  relay = SignalingRelay(connections, viewer_count_enabled=False)
  channels = add_channels(connections, make_channel, "cam", "va")
  connections.classify("cam", Role.CAMERA)

  offer = '{"type": "offer", "offer": "X"}'
  relay.relay("va", accepted(offer, "va"))
  relay.push_viewer_count()

  assert channels["cam"].sent == [offer]

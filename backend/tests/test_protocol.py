import pytest

from turnchat.protocol import FrameError, JoinFrame, KeepaliveFrame, PostFrame, decode_frame


def test_keepalive_literal_text():
    assert decode_frame('{"event":"ping"}') == KeepaliveFrame()


def test_keepalive_with_other_spacing_and_as_object():
    assert decode_frame('{"event": "ping"}') == KeepaliveFrame()
    assert decode_frame({'event': 'ping'}) == KeepaliveFrame()


def test_join_and_message_from_text_and_objects():
    assert decode_frame('{"type":"join","name":"Alice"}') == JoinFrame(name='Alice')
    assert decode_frame({'type': 'message', 'content': 'hi'}) == PostFrame(content='hi')
    assert decode_frame(b'{"type":"message","content":""}') == PostFrame(content='')


@pytest.mark.parametrize('raw', [
    'not json',
    '[1, 2, 3]',
    '"join"',
    42,
    None,
    {'type': 'leave'},
    {'name': 'Alice'},
    {'type': 'join'},
    {'type': 'join', 'name': '   '},
    {'type': 'join', 'name': 7},
    {'type': 'message'},
    {'type': 'message', 'content': ['a']},
    b'\xff\xfe',
])
def test_malformed_frames_raise(raw):
    with pytest.raises(FrameError):
        decode_frame(raw)

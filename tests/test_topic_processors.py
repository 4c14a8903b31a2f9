import pytest

from peermesh.core import P2PError
from peermesh.topic_processors import TopicProcessors


class _Processor:
    def __init__(self, name):
        self.name = name

    def process_message(self, message, from_connected_peer, source):
        return None


def test_new_topic_processors_is_empty():
    tp = TopicProcessors()
    assert tp.get_list() == ([], [])


def test_add_should_work():
    tp = TopicProcessors()
    proc = _Processor("p")

    tp.add_topic_processor("identifier", proc)

    topics, processors = tp.get_list()
    assert topics == ["identifier"]
    assert len(processors) == 1
    assert processors[0] is proc


def test_double_add_should_err():
    tp = TopicProcessors()
    tp.add_topic_processor("identifier", _Processor("a"))

    with pytest.raises(P2PError, match="already defined"):
        tp.add_topic_processor("identifier", _Processor("b"))

    topics, processors = tp.get_list()
    assert len(topics) == 1
    assert len(processors) == 1
    assert processors[0].name == "a"


def test_remove_inexistent_should_err():
    tp = TopicProcessors()
    with pytest.raises(P2PError, match="does not exist"):
        tp.remove_topic_processor("identifier")


def test_remove_should_work():
    tp = TopicProcessors()
    tp.add_topic_processor("identifier1", _Processor("1"))
    tp.add_topic_processor("identifier2", _Processor("2"))

    topics, processors = tp.get_list()
    assert len(topics) == 2
    assert len(processors) == 2

    tp.remove_topic_processor("identifier2")
    topics, processors = tp.get_list()
    assert topics == ["identifier1"]
    assert len(processors) == 1

    tp.remove_topic_processor("identifier1")
    assert tp.get_list() == ([], [])


def test_get_list_keeps_identifiers_and_processors_paired():
    tp = TopicProcessors()
    handler1, handler2, handler3 = _Processor("1"), _Processor("2"), _Processor("3")

    tp.add_topic_processor("identifier3", handler3)
    tp.add_topic_processor("identifier1", handler1)
    tp.add_topic_processor("identifier2", handler2)

    topics, processors = tp.get_list()
    assert sorted(topics) == ["identifier1", "identifier2", "identifier3"]
    assert {id(p) for p in processors} == {id(handler1), id(handler2), id(handler3)}
    assert all(t == f"identifier{p.name}" for t, p in zip(topics, processors))

    tp.remove_topic_processor("identifier1")
    topics, processors = tp.get_list()
    assert sorted(topics) == ["identifier2", "identifier3"]
    assert {id(p) for p in processors} == {id(handler2), id(handler3)}

    tp.remove_topic_processor("identifier2")
    topics, processors = tp.get_list()
    assert topics == ["identifier3"]
    assert processors[0] is handler3
    assert len(processors) == 1

    tp.remove_topic_processor("identifier3")
    assert tp.get_list() == ([], [])
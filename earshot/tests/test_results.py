import logging

import pytest

from earshot.core.config import RecognitionConfig
from earshot.orchestrator.results import RecognitionHypothesis, ResultAggregator, ResultLog
from conftest import group

@pytest.fixture
def aggregator():
    return ResultAggregator()

def test_hello_halo_scenario(aggregator):
    config = RecognitionConfig(minimum_confidence_level=0.5, log_final_only=False)
    outcome = aggregator.process_result_event(
        [group(("hello", 0.9), ("halo", 0.4))], 1000, config
    )

    assert outcome.transcript == "hello"
    assert len(outcome.accepted) == 2
    assert outcome.committed == [RecognitionHypothesis(
        transcript="hello", confidence=0.9, is_final=True, timestamp=1000, is_most_confident=True,
    )]
    assert list(aggregator.log) == outcome.committed

def test_most_confident_below_threshold_commits_nothing(aggregator):
    config = RecognitionConfig(minimum_confidence_level=0.95)
    outcome = aggregator.process_result_event(
        [group(("hello", 0.9), ("halo", 0.4))], 1000, config
    )

    assert outcome.transcript == ""
    assert outcome.committed == []
    assert len(aggregator.log) == 0
    assert len(outcome.accepted) == 2

def test_raw_count_is_sum_of_alternatives(aggregator):
    config = RecognitionConfig(minimum_confidence_level=1.0, log_final_only=True)
    groups = [
        group(("a", 0.1), ("b", 0.2), ("c", 0.3), is_final=False),
        group(("d", 0.5)),
        group(),
        group(("e", 0.9), ("f", 0.8)),
    ]
    outcome = aggregator.process_result_event(groups, 5, config)
    assert len(outcome.accepted) == 6

def test_confidence_boundary_is_inclusive(aggregator):
    config = RecognitionConfig(minimum_confidence_level=0.5)
    outcome = aggregator.process_result_event([group(("edge", 0.5))], 1, config)
    assert [h.transcript for h in outcome.committed] == ["edge"]
    assert outcome.transcript == "edge"

def test_log_final_only_skips_interim_groups(aggregator):
    config = RecognitionConfig(minimum_confidence_level=0.0, log_final_only=True)
    outcome = aggregator.process_result_event(
        [group(("draft", 0.99), is_final=False), group(("done", 0.6))], 1, config
    )
    assert [h.transcript for h in outcome.committed] == ["done"]
    assert outcome.transcript == "done"
    assert [h.is_final for h in outcome.accepted] == [False, True]

def test_interim_groups_logged_when_not_final_only(aggregator):
    config = RecognitionConfig(minimum_confidence_level=0.0, log_final_only=False)
    outcome = aggregator.process_result_event([group(("draft", 0.7), is_final=False)], 1, config)
    assert outcome.transcript == "draft"
    assert aggregator.log[0].is_final is False

def test_most_confident_is_index_zero_regardless_of_confidence(aggregator):
    config = RecognitionConfig(minimum_confidence_level=0.0)
    outcome = aggregator.process_result_event(
        [group(("low", 0.1), ("high", 0.9)), group(("x", 0.5), ("y", 0.6), ("z", 0.7))], 1, config
    )
    assert [h.is_most_confident for h in outcome.accepted] == [True, False, True, False, False]
    # Only index 0 contributes text, even when a later alternative scores higher
    assert outcome.transcript == "lowx"

def test_transcript_concatenates_groups_without_separator(aggregator):
    config = RecognitionConfig()
    outcome = aggregator.process_result_event(
        [group(("hello", 0.9)), group((" world", 0.8)), group(("!", 0.2))], 1, config
    )
    assert outcome.transcript == "hello world"

def test_empty_group_sequence(aggregator):
    outcome = aggregator.process_result_event([], 1, RecognitionConfig())
    assert outcome.transcript == ""
    assert outcome.accepted == []
    assert outcome.committed == []

def test_log_is_append_only_across_events(aggregator):
    config = RecognitionConfig()
    aggregator.process_result_event([group(("one", 0.9))], 1, config)
    first = aggregator.log[0]
    aggregator.process_result_event([group(("two", 0.9), ("too", 0.6))], 2, config)

    assert aggregator.log[0] is first
    assert [h.transcript for h in aggregator.log] == ["one", "two", "too"]
    assert [h.timestamp for h in aggregator.log] == [1, 2, 2]
    assert aggregator.log.transcript() == "onetwo"
    assert [h.transcript for h in aggregator.log.most_confident()] == ["one", "two"]

def test_log_final_view():
    log = ResultLog()
    log.append(RecognitionHypothesis("a", 0.9, False, 1, True))
    log.append(RecognitionHypothesis("b", 0.9, True, 2, True))
    assert [h.transcript for h in log.final()] == ["b"]

def test_hypotheses_are_immutable(aggregator):
    outcome = aggregator.process_result_event([group(("hi", 0.9))], 1, RecognitionConfig())
    with pytest.raises(AttributeError):
        outcome.accepted[0].transcript = "bye"

def test_out_of_range_confidence_is_accepted_and_logged(aggregator, caplog):
    config = RecognitionConfig(minimum_confidence_level=0.5)
    with caplog.at_level(logging.WARNING, logger="earshot.orchestrator.results"):
        outcome = aggregator.process_result_event([group(("loud", 1.7), ("neg", -0.2))], 1, config)

    assert [h.transcript for h in outcome.committed] == ["loud"]
    assert outcome.transcript == "loud"
    assert sum("out of range" in r.getMessage() for r in caplog.records) == 2

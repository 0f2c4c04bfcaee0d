import json

import pytest

from earshot.core.exceptions import ScriptError
from earshot.engines.scripted import ScriptedEngine, load_script, parse_script
from earshot.interfaces.engine import EngineEvent, EngineSignal

SCRIPT = [
    {"signal": "start", "timestamp": 1000},
    {"signal": "result", "timestamp": 1500, "results": [
        {"is_final": True, "alternatives": [
            {"transcript": "hello", "confidence": 0.9},
            {"transcript": "halo", "confidence": 0.4},
        ]},
    ]},
    {"signal": "error", "timestamp": 1600, "error": "aborted"},
    {"signal": "end", "timestamp": 2000},
]

def test_parse_script():
    parsed = parse_script(SCRIPT)
    assert [signal for signal, _ in parsed] == [
        EngineSignal.START, EngineSignal.RESULT, EngineSignal.ERROR, EngineSignal.END,
    ]
    _, result = parsed[1]
    assert result.timestamp == 1500
    assert result.results[0].is_final is True
    assert [a.transcript for a in result.results[0]] == ["hello", "halo"]
    assert result.results[0][1].confidence == 0.4
    _, error = parsed[2]
    assert error.error == "aborted"
    assert error.message is None

@pytest.mark.parametrize("steps", [
    [{"timestamp": 1}],
    [{"signal": "shout"}],
    ["start"],
    [{"signal": "result", "results": [{"alternatives": [{"transcript": "x"}]}]}],
    [{"signal": "start", "timestamp": "soon"}],
])
def test_parse_script_errors(steps):
    with pytest.raises(ScriptError):
        parse_script(steps)

def test_replay_emits_in_order():
    engine = ScriptedEngine()
    seen = []
    engine.on(EngineSignal.START, lambda e: seen.append(("start", e.timestamp)))
    engine.on(EngineSignal.END, lambda e: seen.append(("end", e.timestamp)))

    assert engine.replay(SCRIPT) == 4
    assert seen == [("start", 1000.0), ("end", 2000.0)]

def test_emit_without_callback():
    engine = ScriptedEngine()
    assert engine.emit(EngineSignal.RESULT, EngineEvent(timestamp=1)) is False

def test_clearing_a_slot():
    engine = ScriptedEngine()
    calls = []
    engine.on("start", calls.append)
    engine.on("start", None)
    engine.emit(EngineSignal.START, EngineEvent(timestamp=1))
    assert calls == []

def test_load_script(tmp_path):
    path = tmp_path / "session.json"
    path.write_text(json.dumps(SCRIPT), encoding="utf-8")
    assert load_script(path) == SCRIPT

def test_load_script_rejects_bad_files(tmp_path):
    broken = tmp_path / "broken.json"
    broken.write_text("{not json", encoding="utf-8")
    with pytest.raises(ScriptError):
        load_script(broken)

    not_a_list = tmp_path / "object.json"
    not_a_list.write_text('{"signal": "start"}', encoding="utf-8")
    with pytest.raises(ScriptError):
        load_script(not_a_list)

def test_stop_ends_open_session_once():
    engine = ScriptedEngine()
    ends = []
    engine.on(EngineSignal.END, lambda e: ends.append(e.timestamp))

    engine.start()
    engine.emit(EngineSignal.RESULT, EngineEvent(timestamp=250))
    engine.stop()
    engine.stop()

    assert ends == [250]
    assert engine.active is False

def test_stop_after_scripted_end_does_not_repeat_it():
    engine = ScriptedEngine()
    ends = []
    engine.on(EngineSignal.END, lambda e: ends.append(e.timestamp))

    engine.start()
    engine.replay(SCRIPT)
    engine.stop()
    assert ends == [2000.0]

def test_abort_does_not_report_end():
    engine = ScriptedEngine()
    ends = []
    engine.on(EngineSignal.END, ends.append)
    engine.start()
    engine.abort()
    engine.stop()
    assert ends == []

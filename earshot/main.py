import argparse
import json
import logging
import sys
from earshot.core.logging import setup_logging
from earshot.core.config import Config
from earshot.core.exceptions import EarshotError
from earshot.engines.scripted import ScriptedEngine, load_script
from earshot.orchestrator.events import DomainEvent
from earshot.recognizer import SpeechRecognizer

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Replay a recorded recognition event script")
    parser.add_argument("script", type=str, help="Path to a JSON list of engine events")
    parser.add_argument("--log-level", type=str, default=None, help="Logging level (default: INFO)")
    parser.add_argument("--min-confidence", type=float, default=None,
                        help="Minimum confidence for a hypothesis to be logged")
    parser.add_argument("--final-only", action="store_true", help="Only log final results")
    parser.add_argument("--chain", action="store_true", help="Chain transcripts across sessions")
    return parser

def _overrides(args: argparse.Namespace) -> dict:
    recognition = {}
    if args.min_confidence is not None:
        recognition["minimum_confidence_level"] = args.min_confidence
    if args.final_only:
        recognition["log_final_only"] = True
    if args.chain:
        recognition["chain_transcripts"] = True
    overrides = {"recognition": recognition}
    if args.log_level:
        overrides["logging"] = {"level": args.log_level}
    return overrides

def run(argv=None, out=None) -> int:
    args = build_parser().parse_args(argv)
    out = out or sys.stdout

    try:
        config = Config.load(_overrides(args))
    except EarshotError as e:
        print(f"Invalid configuration: {e}", file=sys.stderr)
        return 2

    setup_logging(level=config.logging.level, stream=sys.stderr)
    logger = logging.getLogger("main")

    engine = ScriptedEngine()
    recognizer = SpeechRecognizer(engine, config)

    def on_result(event):
        logger.info(f"Result: {event.transcript!r}", extra={"raw_results": len(event.raw_results)})

    def on_error(event):
        logger.error(f"Engine error: {event.error}", extra={"error_message": event.message})

    recognizer.subscribe(DomainEvent.RESULT, on_result)
    recognizer.subscribe(DomainEvent.ERROR, on_error)

    try:
        steps = load_script(args.script)
        recognizer.start()
        engine.replay(steps)
    except (OSError, EarshotError) as e:
        logger.error(f"Replay failed: {e}")
        return 1
    finally:
        if recognizer.is_in_progress():
            recognizer.stop()
        recognizer.close()

    summary = {
        "session_id": recognizer.session_id,
        "final_transcript": recognizer.get_final_transcript(),
        "current_transcript": recognizer.get_current_transcript(),
        "results": len(recognizer.results),
        "durations": {
            "session": recognizer.get_duration(),
            "audio": recognizer.get_audio_duration(),
            "sound": recognizer.get_sound_duration(),
            "speech": recognizer.get_speech_duration(),
        },
    }
    print(json.dumps(summary, indent=2), file=out)
    return 0

if __name__ == "__main__":
    sys.exit(run())

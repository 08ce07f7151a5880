# motor_sysid/runners/identify_session.py
"""
Identify feedforward constants from a recorded JSONL session.

    motor-sysid-identify logs/char_run.jsonl --export logs/char_run.csv
"""
import argparse
import sys
from pathlib import Path

from motor_sysid.config.settings import SysIdSettings
from motor_sysid.logger.logger import SysIdLogBundle
from motor_sysid.research.feedforward import SystemIdentification
from motor_sysid.research.replay import load_samples_jsonl


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(description="Fit V = kS*sign(v) + kV*v + kA*a to recorded samples")
    p.add_argument("session", help="JSONL session containing sysid.sample events")
    p.add_argument("--config", default=None, help="settings YAML (defaults to bundled sysid_default.yaml)")
    p.add_argument("--no-static-friction", action="store_true", help="drop the kS term")
    p.add_argument("--no-acceleration", action="store_true", help="drop the kA term")
    p.add_argument("--export", default=None, help="write samples to this CSV after fitting")
    p.add_argument("--log-dir", default=None)
    p.add_argument("--console", action="store_true", help="mirror the run log to stderr")
    return p


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    settings = SysIdSettings.load(args.config)

    if args.no_static_friction:
        settings.model.include_static_friction = False
    if args.no_acceleration:
        settings.model.include_acceleration = False
    if args.log_dir:
        settings.logging.log_dir = args.log_dir

    bundle = SysIdLogBundle(
        name=Path(args.session).stem + "_identify",
        log_dir=settings.logging.log_dir,
        level=settings.logging.level_no,
        console=args.console or settings.logging.console,
    )
    try:
        sysid = SystemIdentification(events=bundle.events, logger=bundle.text.get_logger())
        for sample in load_samples_jsonl(args.session, history_size=settings.acceleration_history):
            sysid.add_sample(sample)

        ok = sysid.identify_spec(settings.model.to_spec())
        print(sysid.format_results() if ok else "System identification failed. Check data quality.")
        sysid.log_results()

        export_path = args.export or settings.export.path
        if export_path:
            if sysid.export_csv(export_path, precision=settings.export.precision):
                print("Wrote:", export_path)
            else:
                print("Export failed:", export_path)
    finally:
        bundle.close()

    return 0 if ok else 1


if __name__ == "__main__":
    sys.exit(main())

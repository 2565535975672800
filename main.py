# main.py
import sys, os
sys.path.append(os.path.dirname(__file__))  # 確保能找到 config.py

from utils.crashlog import setup_crashlog, log_exception, log_dir
setup_crashlog()

import argparse
from config import AppConfig, KeyboardConfig, RenderConfig, AudioConfig
from notes.instruments import INSTRUMENTS
import logging, traceback

def _init_logging():
    logs = log_dir()
    log_path = os.path.join(logs, "app.log")

    if logging.getLogger().handlers:
        return

    logging.basicConfig(
        level=logging.DEBUG,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        encoding="utf-8"
    )
    try:
        from logging.handlers import RotatingFileHandler
        fh = RotatingFileHandler(log_path, maxBytes=2*1024*1024, backupCount=3, encoding="utf-8")
        fh.setLevel(logging.DEBUG)
        fh.setFormatter(logging.Formatter("%(asctime)s [%(levelname)s] %(name)s: %(message)s"))
        logging.getLogger().addHandler(fh)
    except OSError:
        logging.warning("Could not open %s; logging to console only", log_path)

def build_config(argv=None) -> AppConfig:
    ap = argparse.ArgumentParser(description="Virtual piano")
    ap.add_argument('--instrument', default='piano', choices=list(INSTRUMENTS))
    ap.add_argument('--octave', type=int, default=0, help='starting octave offset')
    ap.add_argument('--compact', action='store_true', help='start with the compact key range')
    ap.add_argument('--sustain', type=float, default=0.5, help='release time in seconds')
    ap.add_argument('--velocity', type=int, default=60)
    ap.add_argument('--attack', type=float, default=0.3)
    ap.add_argument('--master', type=float, default=0.6, help='master output level 0..1')
    ap.add_argument('--device', type=int, default=None, help='pygame.midi output device id')
    ap.add_argument('--key-width', type=float, default=40.0)
    ap.add_argument('--cancel-on-arm', action='store_true',
                    help='re-arming the recorder also cancels a running playback')
    args = ap.parse_args(argv)

    return AppConfig(
        keyboard=KeyboardConfig(start_octave=args.octave),
        render=RenderConfig(white_key_w=args.key_width),
        audio=AudioConfig(
            instrument=args.instrument,
            sustain_time=args.sustain,
            velocity=args.velocity,
            attack=args.attack,
            master_level=args.master,
            device_id=args.device,
        ),
        compact=args.compact,
        cancel_on_arm=args.cancel_on_arm,
    )

def main():
    _init_logging()
    cfg = build_config()
    logging.info("Starting: instrument=%s octave=%+d", cfg.audio.instrument, cfg.keyboard.start_octave)

    from app import App
    App(cfg).run()

if __name__ == '__main__':
    try:
        main()
    except Exception as e:
        try:
            log_exception("Top-level exception", e)
        except OSError:
            pass
        logging.error("Uncaught exception: %s", e, exc_info=True)
        print("Something went wrong; see logs/app.log and logs/error-*.txt")
        traceback.print_exc()

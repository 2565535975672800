# app.py
import logging
import time
import pygame
from typing import Optional, Set
from config import AppConfig
from controller import PianoController
from render.renderer import Renderer
from audio.synth import MidiToneGenerator, SilentToneGenerator, ToneGenerator
from input.keymap import keycode_to_name

HUD_HELP = "keys: a w s e d f t g y h u j k o l p ; '   z/x: octave -/+"

def make_tone_generator(cfg: AppConfig) -> ToneGenerator:
    gen = MidiToneGenerator.open(cfg.audio.device_id)
    if gen is None:
        logging.warning("Falling back to silent tone generator")
        return SilentToneGenerator()
    return gen

class App:
    def __init__(self, cfg: AppConfig, tone_generator: Optional[ToneGenerator] = None):
        self.cfg = cfg
        self.renderer = Renderer(cfg.render)
        self.ctrl = PianoController(cfg, tone_generator or make_tone_generator(cfg),
                                    clock=time.perf_counter)
        self.renderer.set_layout(self.ctrl.layout)
        self._held: Set[int] = set()  # 用來判斷 key repeat

    def _on_button(self, label: str) -> bool:
        """Returns False when the app should quit."""
        if label == "RECORD":
            self.ctrl.toggle_record()
        elif label == "PLAY":
            self.ctrl.trigger_playback()
        elif label == "STOP":
            self.ctrl.stop_playback()
        elif label == "MODE":
            self.ctrl.cycle_instrument()
            self.renderer.set_layout(self.ctrl.layout)
        elif label == "RANGE":
            self.ctrl.cycle_range()
            self.renderer.set_layout(self.ctrl.layout)
        elif label == "QUIT":
            return False
        return True

    # ---------- Main loop ----------
    def run(self):
        running = True
        try:
            while running:
                self.renderer.tick(60)
                for e in pygame.event.get():
                    if e.type == pygame.QUIT:
                        running = False

                    if e.type == pygame.KEYDOWN:
                        repeat = e.key in self._held
                        self._held.add(e.key)
                        self.ctrl.key_down(keycode_to_name(e.key), repeat=repeat)

                    if e.type == pygame.KEYUP:
                        self._held.discard(e.key)
                        self.ctrl.key_up(keycode_to_name(e.key))

                    if e.type == pygame.MOUSEBUTTONDOWN and e.button == 1:
                        label = self.renderer.button_at(*e.pos)
                        if label is not None:
                            running = self._on_button(label)
                        else:
                            self.ctrl.pointer_down(self.renderer.key_at(*e.pos))

                    if e.type == pygame.MOUSEBUTTONUP and e.button == 1:
                        self.ctrl.pointer_up(self.renderer.key_at(*e.pos))

                if not running: break

                # 回放排程 + release envelope
                self.ctrl.update()

                # ----- Render -----
                self.renderer.begin_frame()
                lit = set()
                if self.ctrl.session.recording: lit.add("RECORD")
                if self.ctrl.recorder.playing: lit.add("PLAY")
                self.renderer.draw_status_bar("  |  ".join(self.ctrl.status_fields()), lit=lit)
                self.renderer.hud(HUD_HELP)
                self.renderer.draw_keyboard(highlight=self.ctrl.engine.highlight_pitches)
                self.renderer.end_frame()
        finally:
            self.ctrl.shutdown()
            pygame.quit()

# render/renderer.py
import pygame, logging
from typing import Dict, List, Optional
from notes.model import KeySlot
from render.layout import key_at, layout_width
from config import RenderConfig

STATUS_H = 36
BTN_PAD_X = 12
BTN_GAP = 10
BUTTONS = ["RECORD", "PLAY", "STOP", "MODE", "RANGE", "QUIT"]

class Renderer:
    def __init__(self, cfg: RenderConfig):
        pygame.init()
        self.cfg = cfg
        self.screen = pygame.display.set_mode((cfg.window_w, cfg.window_h))
        pygame.display.set_caption("Virtual Piano")
        self.font = pygame.font.SysFont("consolas", 18)
        self.font_small = pygame.font.SysFont("consolas", 14)
        self.clock = pygame.time.Clock()
        self.button_rects: Dict[str, pygame.Rect] = {}

        self.layout: List[KeySlot] = []
        self.scale = 1.0
        self.kb_y = cfg.window_h - cfg.white_key_h

    def set_layout(self, layout: List[KeySlot]):
        """Replace the drawn keyboard; the layout is scaled to fit the window."""
        self.layout = list(layout)
        total = layout_width(self.layout, self.cfg.white_key_w)
        self.scale = float(self.cfg.window_w) / total if total > 0 else 1.0
        logging.debug("Renderer layout: keys=%d width=%.1f scale=%.3f",
                      len(self.layout), total, self.scale)

    def tick(self, fps=60) -> float:
        return self.clock.tick(fps) / 1000.0

    def begin_frame(self):
        self.screen.fill((12, 12, 14))

    def end_frame(self):
        pygame.display.flip()

    def draw_status_bar(self, right_info_text: str = "", lit: Optional[set] = None):
        lit = lit or set()
        pygame.draw.rect(self.screen, (24, 24, 28), (0, 0, self.cfg.window_w, STATUS_H))
        pygame.draw.line(self.screen, (60, 60, 66), (0, STATUS_H), (self.cfg.window_w, STATUS_H), 1)

        x = 10; self.button_rects.clear()
        for label in BUTTONS:
            surf = self.font_small.render(label, True, (220, 220, 230))
            rect = surf.get_rect(); rect.topleft = (x + BTN_PAD_X, (STATUS_H - rect.height)//2)
            box = pygame.Rect(x, 4, rect.width + BTN_PAD_X*2, STATUS_H - 8)
            fill = (150, 40, 40) if label in lit else (40, 40, 46)
            pygame.draw.rect(self.screen, fill, box, border_radius=6)
            pygame.draw.rect(self.screen, (75, 75, 85), box, 1, border_radius=6)
            self.screen.blit(surf, rect)
            self.button_rects[label] = box
            x += box.width + BTN_GAP

        if right_info_text:
            right = self.font_small.render(right_info_text, True, (180, 180, 190))
            self.screen.blit(right, (self.cfg.window_w - right.get_width() - 10,
                                     (STATUS_H - right.get_height())//2))

    def button_at(self, mx: int, my: int) -> Optional[str]:
        if my > STATUS_H:
            return None
        for label, rect in self.button_rects.items():
            if rect.collidepoint(mx, my):
                return label
        return None

    # ------- piano -------
    def draw_keyboard(self, highlight: Optional[set] = None):
        highlight = highlight or set()
        s, kw = self.scale, self.cfg.white_key_w
        y, wh, bh = self.kb_y, self.cfg.white_key_h, self.cfg.black_key_h
        pygame.draw.rect(self.screen, (28, 28, 32), (0, y, self.cfg.window_w, wh))

        # 先白鍵再黑鍵，黑鍵蓋在上面
        for k in self.layout:
            if k.is_black: continue
            fill = (230, 230, 230) if k.midi not in highlight else (255, 240, 170)
            r = (k.x * s, y, kw * s - 1, wh)
            pygame.draw.rect(self.screen, fill, r)
            pygame.draw.rect(self.screen, (60, 60, 66), r, 1)
        for k in self.layout:
            if not k.is_black: continue
            fill = (18, 18, 20) if k.midi not in highlight else (255, 200, 120)
            r = (k.x * s, y, k.width(kw) * s, bh)
            pygame.draw.rect(self.screen, fill, r)
            pygame.draw.rect(self.screen, (60, 60, 66), r, 1)

    def key_at(self, mx: int, my: int) -> Optional[int]:
        if self.scale <= 0:
            return None
        return key_at(self.layout, mx / self.scale, my - self.kb_y,
                      self.cfg.white_key_w, self.cfg.white_key_h, self.cfg.black_key_h)

    def hud(self, text: str):
        surf = self.font.render(text, True, (200, 200, 210))
        self.screen.blit(surf, (10, STATUS_H + 6))

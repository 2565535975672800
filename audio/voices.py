# audio/voices.py
from typing import Callable, Dict, Generic, List, Optional, Tuple, TypeVar

H = TypeVar("H")

class VoiceRegistry(Generic[H]):
    """
    pitch -> sound handle，同一個 pitch 最多一個 voice：
    - start_voice 對已在響的 pitch 是 no-op（不會再向音源要 handle）
    - stop_voice 對沒在響的 pitch 是 no-op
    """
    def __init__(self):
        self._voices: Dict[int, H] = {}

    def __len__(self) -> int:
        return len(self._voices)

    def __contains__(self, pitch: int) -> bool:
        return pitch in self._voices

    def get(self, pitch: int) -> Optional[H]:
        return self._voices.get(pitch)

    def active_notes(self) -> List[int]:
        return sorted(self._voices)

    def start_voice(self, pitch: int, factory: Callable[[], H]) -> Tuple[H, bool]:
        if pitch in self._voices:
            return self._voices[pitch], False
        handle = factory()
        self._voices[pitch] = handle
        return handle, True

    def stop_voice(self, pitch: int) -> Optional[H]:
        return self._voices.pop(pitch, None)

    def stop_all(self) -> List[Tuple[int, H]]:
        drained = list(self._voices.items())
        self._voices.clear()
        return drained

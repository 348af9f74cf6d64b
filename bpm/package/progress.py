"""
Progress reporting for package installation
"""

from typing import Optional

from tqdm import tqdm


class NullProgress:
    """Progress sink that reports nothing"""

    def begin(self, total: int, label: str) -> None:
        pass

    def advance(self, n: int = 1) -> None:
        pass

    def finish(self, label: str) -> None:
        pass


class TqdmProgress:
    """Progress sink that draws a tqdm bar per package"""

    def __init__(self, **tqdm_kwargs):
        self.tqdm_kwargs = tqdm_kwargs
        self._bar: Optional[tqdm] = None

    def begin(self, total: int, label: str) -> None:
        self.finish_quietly()
        self._bar = tqdm(total=total, desc=label, unit="bin", **self.tqdm_kwargs)

    def advance(self, n: int = 1) -> None:
        if self._bar is not None:
            self._bar.update(n)

    def finish(self, label: str) -> None:
        if self._bar is None:
            return
        self._bar.set_description_str(label)
        self._bar.close()
        self._bar = None

    def finish_quietly(self) -> None:
        """Close a bar left open by an aborted install"""
        if self._bar is not None:
            self._bar.close()
            self._bar = None

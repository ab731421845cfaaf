"""
Saved state of a flow domain: settings (``meta``) plus named profiles.
"""
import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Union

import numpy as np


def _to_json(value):
    if isinstance(value, np.ndarray):
        return value.tolist()
    if isinstance(value, np.generic):
        return value.item()
    if isinstance(value, dict):
        return {k: _to_json(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_to_json(v) for v in value]
    return value


@dataclass
class FlowSnapshot:
    """
    Domain settings and solution profiles.

    ``meta`` holds the dictionary written by ``StFlow.get_meta``; ``data``
    maps 'grid', the component names and derived quantities such as 'D'
    (density) to arrays with one value per grid point.
    """
    meta: Dict[str, Any] = field(default_factory=dict)
    data: Dict[str, np.ndarray] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {'meta': _to_json(self.meta), 'data': _to_json(self.data)}

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> 'FlowSnapshot':
        data = {name: np.asarray(values, dtype=float)
                for name, values in d.get('data', {}).items()}
        return cls(meta=dict(d.get('meta', {})), data=data)

    def save(self, path: Union[str, Path]):
        """Write the snapshot as JSON"""
        with open(path, 'w') as f:
            json.dump(self.to_dict(), f, indent=2)

    @classmethod
    def load(cls, path: Union[str, Path]) -> 'FlowSnapshot':
        with open(path) as f:
            return cls.from_dict(json.load(f))

from typing import Any, Dict


def init_metrics() -> Dict[str, Any]:
    return {
        'shifts_fired': 0,
        'cells_shifted': 0,
        'repairs_performed': 0,
        'cells_carved': 0,
        'degenerate_validations': 0,
        'chambers_built': 0,
        'pillars_placed': 0,
        'archways_built': 0,
        'corridors_widened': 0,
        'noise_flips': 0,
        'cells_refined': {},
        'runtime_ms': 0.0,
        'phase_ms': {},
    }

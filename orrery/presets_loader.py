#!/usr/bin/env python3
"""
Scenario JSON loading utilities.

This module defines a simple JSON schema and loader for scenario templates
(orrery/templates/*.json): a list of bodies to spawn plus optional frame settings.

Schema
======
{
  "name": "Human-friendly preset name",
  "description": "Optional description",
  "dt": 0.25,                         # optional, days per tick
  "time_scale": 20.0,                 # optional, multiplier on dt
  "central_id": "sun",                # optional, body to seed circular orbits around
  "seed_circular": true,              # optional, default false
  "clockwise": false,                 # optional, default false
  "zero_momentum": true,              # optional, default false
  "trail_lengths": {"earth": 2000},   # optional, samples per body id
  "bodies": [
    {
      "id": "sun",
      "name": "Sun",
      "mass": 1.0,                    # Msun
      "radius": 0.022,                # visual, AU
      "position": [0.0, 0.0, 0.0],    # AU
      "velocity": [0.0, 0.0, 0.0],    # AU/day, optional
      "color": [245, 158, 11]
    }
  ]
}

Users can add their own JSON files into the templates folder and they'll be picked
up by the loader. Unreadable files and malformed bodies are skipped with a warning.
"""
import json
import logging
import os
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

from .data_models import Body
from .seeding import seed_circular_velocities, zero_system_momentum

logger = logging.getLogger(__name__)

TEMPLATES_DIR = os.path.join(os.path.dirname(__file__), "templates")


@dataclass
class Scenario:
  name: str
  bodies: List[Body]
  description: str = ""
  dt: Optional[float] = None
  time_scale: Optional[float] = None
  trail_lengths: Dict[str, int] = field(default_factory=dict)


def _read_json(path: str) -> Optional[dict]:
  try:
    with open(path, "r", encoding="utf-8") as f:
      data = json.load(f)
  except (OSError, ValueError) as exc:
    logger.warning("could not read scenario %s: %s", path, exc)
    return None
  if not isinstance(data, dict):
    logger.warning("scenario %s is not a JSON object", path)
    return None
  return data


def _coerce_color(c) -> Tuple[int, int, int]:
  try:
    r, g, b = int(c[0]), int(c[1]), int(c[2])
  except (TypeError, ValueError, IndexError):
    return (200, 200, 255)
  r = max(0, min(255, r)); g = max(0, min(255, g)); b = max(0, min(255, b))
  return (r, g, b)


def _optional_float(data: dict, key: str) -> Optional[float]:
  val = data.get(key)
  if val is None:
    return None
  try:
    return float(val)
  except (TypeError, ValueError):
    logger.warning("ignoring non-numeric %s=%r", key, val)
    return None


def body_from_dict(b: dict, index: int = 0) -> Body:
  """Build a Body from one template entry; raises KeyError/ValueError/TypeError."""
  name = b.get("name", f"Body {index}")
  return Body(
    id=str(b.get("id") or name.lower().replace(" ", "-")),
    name=name,
    mass=float(b["mass"]),
    radius=float(b.get("radius", 0.01)),
    position=tuple(float(x) for x in b["position"]),
    velocity=tuple(float(x) for x in b.get("velocity", (0.0, 0.0, 0.0))),
    color=_coerce_color(b.get("color", [200, 200, 255])),
  )


def scenario_from_dict(data: dict, default_name: str = "Scenario") -> Scenario:
  """
  Build a Scenario from parsed template JSON, applying the optional circular
  seeding and momentum zeroing. Bad bodies and duplicate ids are skipped.
  """
  bodies: List[Body] = []
  seen = set()
  for k, b in enumerate(data.get("bodies", [])):
    try:
      body = body_from_dict(b, k)
    except (KeyError, TypeError, ValueError, AttributeError) as exc:
      logger.warning("skipping body #%d in %s: %s", k, default_name, exc)
      continue
    if body.id in seen:
      logger.warning("skipping duplicate body id %r in %s", body.id, default_name)
      continue
    seen.add(body.id)
    bodies.append(body)

  if data.get("seed_circular"):
    bodies = seed_circular_velocities(
      bodies, str(data.get("central_id", "sun")), bool(data.get("clockwise", False)))
  if data.get("zero_momentum"):
    bodies = zero_system_momentum(bodies)

  trail_lengths: Dict[str, int] = {}
  for body_id, n in (data.get("trail_lengths") or {}).items():
    try:
      trail_lengths[str(body_id)] = max(0, int(n))
    except (TypeError, ValueError):
      logger.warning("ignoring trail length %r for %r", n, body_id)

  return Scenario(
    name=data.get("name") or default_name,
    bodies=bodies,
    description=data.get("description", ""),
    dt=_optional_float(data, "dt"),
    time_scale=_optional_float(data, "time_scale"),
    trail_lengths=trail_lengths,
  )


def list_templates(directory: str = TEMPLATES_DIR) -> List[Tuple[str, str]]:
  """Return list of (file_name, display_name) for available templates."""
  items: List[Tuple[str, str]] = []
  if not os.path.isdir(directory):
    return items
  for fn in sorted(os.listdir(directory)):
    if not fn.lower().endswith(".json"):
      continue
    path = os.path.join(directory, fn)
    data = _read_json(path) or {}
    display = data.get("name") or os.path.splitext(fn)[0]
    items.append((fn, display))
  return items


def load_template(file_name: str, directory: str = TEMPLATES_DIR) -> Scenario:
  """
  Load a template JSON by file name.
  An unreadable file gives an empty scenario named after the file.
  """
  path = os.path.join(directory, file_name)
  default_name = os.path.splitext(file_name)[0]
  data = _read_json(path) or {}
  return scenario_from_dict(data, default_name)

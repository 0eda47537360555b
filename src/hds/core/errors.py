from __future__ import annotations

import json
from dataclasses import asdict
from datetime import datetime, UTC
from pathlib import Path
from typing import Mapping, Sequence
from uuid import uuid4

from hds.contracts import ForensicArtifact


class EngineIntegrityError(RuntimeError):
    """A running match hit a state its inputs should have made impossible."""

    def __init__(self, artifact: ForensicArtifact) -> None:
        super().__init__(artifact.message)
        self.artifact = artifact

    @property
    def error_code(self) -> str:
        return self.artifact.error_code


class DiceNotationError(ValueError):
    pass


class CourtBoundsError(ValueError):
    pass


def build_forensic_artifact(
    *,
    engine_scope: str,
    error_code: str,
    message: str,
    state_snapshot: Mapping[str, object],
    context: Mapping[str, object] | None = None,
    identifiers: Mapping[str, str] | None = None,
    causal_fragment: Sequence[str] = (),
) -> ForensicArtifact:
    return ForensicArtifact(
        artifact_id=str(uuid4()),
        timestamp=datetime.now(UTC),
        engine_scope=engine_scope,
        error_code=error_code,
        message=message,
        state_snapshot=dict(state_snapshot),
        context=dict(context or {}),
        identifiers=dict(identifiers or {}),
        causal_fragment=list(causal_fragment),
    )


def integrity_error_from(
    exc: Exception,
    *,
    engine_scope: str,
    error_code: str,
    state_snapshot: Mapping[str, object],
    identifiers: Mapping[str, str],
    causal_fragment: Sequence[str],
) -> EngineIntegrityError:
    artifact = build_forensic_artifact(
        engine_scope=engine_scope,
        error_code=error_code,
        message=str(exc) or type(exc).__name__,
        state_snapshot=state_snapshot,
        context={"exception_type": type(exc).__name__},
        identifiers=identifiers,
        causal_fragment=causal_fragment,
    )
    return EngineIntegrityError(artifact)


def persist_forensic_artifact(artifact: ForensicArtifact, output_dir: Path) -> Path:
    output_dir.mkdir(parents=True, exist_ok=True)
    match_id = artifact.identifiers.get("match_id", "unscoped")
    path = output_dir / f"forensic_{match_id}_{artifact.artifact_id}.json"
    path.write_text(json.dumps(asdict(artifact), default=str, indent=2), encoding="utf-8")
    return path

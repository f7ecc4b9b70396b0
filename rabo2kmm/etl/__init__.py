"""
ETL Package - Rabobank CSV export to KMyMoney import converter

Modules:
- extract: quoted-field tokenizer and file reading
- schema: versioned column layouts (v1, v2, v3)
- dq: non-fatal record validation
- transform: target record mapping and memo synthesis
- load: per-account output files with once-per-run reset
- pipeline: Main orchestrator
"""
from .pipeline import ConversionPipeline
from .models import FileResult, TargetRecord, SchemaVersion

__all__ = ['ConversionPipeline', 'FileResult', 'TargetRecord', 'SchemaVersion']

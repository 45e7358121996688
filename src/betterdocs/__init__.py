from .config import DocsConfig, load_config
from .dsl import docs_pipeline, sh
from .model import Pipeline, Step
from .runner import run_pipeline

__all__ = ["DocsConfig", "load_config", "docs_pipeline", "sh", "Pipeline", "Step", "run_pipeline"]

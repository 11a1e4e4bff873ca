from typing import Dict, List, Optional, Union

import yaml
from pydantic import BaseModel, Field


class CondaEnvironmentSpec(BaseModel):
    """Input conda environment.yaml spec, as published with each release"""
    name: Optional[str] = None
    channels: List[str] = Field(default=[])
    # pip requirements are nested as `- pip: [...]`
    dependencies: List[Union[str, Dict[str, List[str]]]] = Field(default=[])
    variables: Optional[Dict[str, str]] = Field(default={})

    @classmethod
    def from_yaml(cls, text: str) -> "CondaEnvironmentSpec":
        raw_env_spec = yaml.safe_load(text) or {}
        return cls.model_validate(raw_env_spec)

    @property
    def conda_dependencies(self) -> List[str]:
        return [dep for dep in self.dependencies if isinstance(dep, str)]

    @property
    def pip_dependencies(self) -> List[str]:
        pip_deps = []
        for dep in self.dependencies:
            if isinstance(dep, dict):
                pip_deps.extend(dep.get("pip", []))
        return pip_deps

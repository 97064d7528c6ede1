"""ts-express-init scaffolder -- writes the starter project's files.

Quick usage::

    from ts_express_init.config import ProjectParameters, WorkingDirectory
    from ts_express_init.scaffolder import ProjectGenerator

    generator = ProjectGenerator(
        WorkingDirectory(root=Path("demo")), ProjectParameters(name="demo", port=8080)
    )
    await generator.write_entrypoint()
"""

from ts_express_init.scaffolder.generator import ProjectGenerator
from ts_express_init.scaffolder.manifest import inject_scripts, load_manifest
from ts_express_init.scaffolder.templates import TemplateRenderer
from ts_express_init.scaffolder.tsconfig import build_tsconfig, merge_tsconfig

__all__ = [
    "ProjectGenerator",
    "TemplateRenderer",
    "build_tsconfig",
    "inject_scripts",
    "load_manifest",
    "merge_tsconfig",
]

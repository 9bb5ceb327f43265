import importlib, pkgutil

# Load every models.* submodule so all classes land in the declarative registry
for m in pkgutil.iter_modules(__path__, __name__ + "."):
    importlib.import_module(m.name)

from .source_data import SourceData  # noqa: E402,F401
from .post import GeneratedPost, PostStatusEnum  # noqa: E402,F401
from .prompt import Prompt  # noqa: E402,F401
from .image_prompt import ImagePrompt  # noqa: E402,F401

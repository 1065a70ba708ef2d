import os
import importlib
import inspect
import logging
from blocks.base_block import BaseBlock

logger = logging.getLogger(__name__)

BLOCKS_DIR = os.path.join(os.path.dirname(os.path.abspath(__file__)), '..', 'blocks')
_SKIP = {'base_block.py', 'input_helpers.py'}


def _module_names(blocks_dir, package='blocks'):
    for entry in sorted(os.listdir(blocks_dir)):
        path = os.path.join(blocks_dir, entry)
        if os.path.isdir(path) and os.path.exists(os.path.join(path, '__init__.py')):
            yield from _module_names(path, f"{package}.{entry}")
        elif entry.endswith('.py') and not entry.startswith('__') and entry not in _SKIP:
            yield f"{package}.{entry[:-3]}"


def load_blocks(blocks_dir=None):
    """
    Scans the 'blocks' directory and its sub-packages, imports all block
    modules, and returns a list of all block classes.
    """
    block_classes = []
    for module_name in _module_names(blocks_dir or BLOCKS_DIR):
        try:
            module = importlib.import_module(module_name)
        except ImportError as e:
            logger.error(f"Error loading block from {module_name}: {e}")
            continue
        for name, obj in inspect.getmembers(module, inspect.isclass):
            if (issubclass(obj, BaseBlock) and obj is not BaseBlock
                    and obj.__module__ == module.__name__ and obj not in block_classes):
                block_classes.append(obj)

    return block_classes


def blocks_by_name(blocks_dir=None):
    """Map block_name to block class."""
    return {cls().block_name: cls for cls in load_blocks(blocks_dir)}

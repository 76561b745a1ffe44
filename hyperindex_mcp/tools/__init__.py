"""Built-in tools and their registration."""

from hyperindex_mcp.config import Settings
from hyperindex_mcp.registry import ToolRegistry
from hyperindex_mcp.tools import calculator, indexer, text


def register_builtin_tools(registry: ToolRegistry, settings: Settings) -> ToolRegistry:
    registry.register(calculator.NAME, calculator.DESCRIPTION, calculator.CalculateParams, calculator.calculate)
    registry.register(text.WORD_COUNT, text.WORD_COUNT_DESCRIPTION, text.WordCountParams, text.word_count)
    registry.register(text.CHAR_COUNT, text.CHAR_COUNT_DESCRIPTION, text.CharCountParams, text.char_count)
    registry.register(
        indexer.NAME,
        indexer.DESCRIPTION,
        indexer.InitializeIndexerParams,
        indexer.InitializeIndexer(settings),
    )
    return registry

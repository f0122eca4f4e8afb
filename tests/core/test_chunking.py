"""
Test suite for ChunkingTask.

Tests chunk size bounds, ordering, empty input, unsplittable units and
deterministic chunk IDs.

System role: Verification of the chunking stage
"""

import pytest

from nova.core.document_processing.tasks.chunking_task import ChunkingTask


@pytest.fixture
def chunker() -> ChunkingTask:
    """Provide chunker with a small size bound."""
    return ChunkingTask(chunk_size=50, chunk_overlap=0)


class TestChunkingTaskInit:
    """Test suite for ChunkingTask configuration."""

    def test_init_should_reject_overlap_not_smaller_than_size(self) -> None:
        """Test overlap equal to size raises ValueError."""
        with pytest.raises(ValueError):
            ChunkingTask(chunk_size=100, chunk_overlap=100)

    def test_init_should_reject_non_positive_size(self) -> None:
        """Test zero chunk size raises ValueError."""
        with pytest.raises(ValueError):
            ChunkingTask(chunk_size=0)


class TestChunkingTaskSplit:
    """Test suite for ChunkingTask.split method."""

    @pytest.mark.parametrize("text", ["", "   ", "\n\n\t"])
    def test_split_should_return_empty_list_for_blank_text(self, chunker: ChunkingTask, text: str) -> None:
        """Test blank text yields no chunks."""
        assert chunker.split(text) == []

    def test_split_should_keep_short_text_as_single_chunk(self, chunker: ChunkingTask) -> None:
        """Test text under the bound becomes one chunk."""
        # Act
        chunks = chunker.split("The capital of France is Paris.", source="france.txt")

        # Assert
        assert len(chunks) == 1
        assert chunks[0].content == "The capital of France is Paris."
        assert chunks[0].metadata["source"] == "france.txt"
        assert chunks[0].index == 0

    def test_split_should_respect_size_bound(self, chunker: ChunkingTask) -> None:
        """Test no chunk exceeds chunk_size when every word fits."""
        # Arrange
        text = " ".join(f"word{i}" for i in range(200))

        # Act
        chunks = chunker.split(text)

        # Assert
        assert len(chunks) > 1
        assert all(len(chunk.content) <= 50 for chunk in chunks)
        assert all(chunk.content for chunk in chunks)

    def test_split_should_preserve_order(self, chunker: ChunkingTask) -> None:
        """Test chunk order follows the text and indexes are sequential."""
        # Arrange
        paragraphs = [f"Paragraph {i} says something short." for i in range(5)]
        text = "\n\n".join(paragraphs)

        # Act
        chunks = chunker.split(text)

        # Assert
        assert [chunk.index for chunk in chunks] == list(range(len(chunks)))
        joined = " ".join(chunk.content for chunk in chunks)
        positions = [joined.index(f"Paragraph {i}") for i in range(5)]
        assert positions == sorted(positions)

    def test_split_should_keep_oversized_word_whole(self, chunker: ChunkingTask) -> None:
        """Test a single unit longer than the bound becomes its own chunk."""
        # Arrange
        long_word = "x" * 120
        text = f"short words here {long_word} and more short words"

        # Act
        chunks = chunker.split(text)

        # Assert
        assert long_word in [chunk.content for chunk in chunks]
        assert all(len(chunk.content) <= 50 for chunk in chunks if chunk.content != long_word)

    def test_split_should_generate_deterministic_ids(self, chunker: ChunkingTask) -> None:
        """Test the same text and source give the same chunk IDs."""
        # Arrange
        text = "alpha beta gamma " * 20

        # Act
        first = chunker.split(text, source="a.txt")
        second = chunker.split(text, source="a.txt")

        # Assert
        assert [chunk.id for chunk in first] == [chunk.id for chunk in second]
        assert len({chunk.id for chunk in first}) == len(first)

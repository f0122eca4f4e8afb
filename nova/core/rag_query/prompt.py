"""
Prompt templates and assembly.

Two fixed templates: a plain conversational prompt for /ask and a grounded
prompt that adds retrieved context for /rag. Assembly is pure; the same
inputs always produce the same prompt text.

Dependencies: langchain_core.prompts
System role: Prompt construction for model calls
"""

from langchain_core.prompts import PromptTemplate

EMPTY_CONTEXT_MARKER = "(no relevant context found)"

PLAIN_TEMPLATE = """You are Nova, a friendly and helpful AI assistant. Your responses should be conversational and direct.
Answer the user's message. Use the provided chat history for context if available.

Current conversation:
{history}

User: {question}
Nova:"""

GROUNDED_TEMPLATE = """You are Nova, a helpful assistant. Use the following context, conversation history and the user's question to provide an accurate and concise response.

Conversation History:
{history}

Context:
{context}

User's Question:
{question}

Your Response:
"""

PLAIN_PROMPT = PromptTemplate.from_template(PLAIN_TEMPLATE)
GROUNDED_PROMPT = PromptTemplate.from_template(GROUNDED_TEMPLATE)


class PromptAssembler:
    """Render plain or grounded prompts from a question, history and context."""

    def __init__(
        self,
        plain: PromptTemplate = PLAIN_PROMPT,
        grounded: PromptTemplate = GROUNDED_PROMPT,
    ) -> None:
        self._plain = plain
        self._grounded = grounded

    def plain(self, question: str, history: str = "") -> str:
        return self._plain.format(question=question, history=history)

    def grounded(self, question: str, history: str = "", context: str | None = None) -> str:
        """
        Render the grounded prompt.

        Args:
            question: User question
            history: Rendered conversation history
            context: Retrieved chunk texts joined by blank lines

        Returns:
            str: Prompt with an explicit marker when no context was retrieved
        """
        if not context or not context.strip():
            context = EMPTY_CONTEXT_MARKER
        return self._grounded.format(question=question, history=history, context=context)

    def assemble(
        self,
        question: str,
        history: str = "",
        context: str | None = None,
        grounded: bool = False,
    ) -> str:
        """
        Build the prompt for a model call.

        Args:
            question: User question
            history: Rendered conversation history ("" for none)
            context: Retrieved context, only used for grounded prompts
            grounded: Select the grounded template

        Returns:
            str: Final prompt text
        """
        if grounded or context is not None:
            return self.grounded(question, history, context)
        return self.plain(question, history)

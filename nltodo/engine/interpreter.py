"""Natural-language command interpreter.

One command = one classifier call, at most one store mutation, and one final read of
the whole list. The interpreter keeps no state between commands.

Known race: positional commands resolve "Nth unfinished task" and then mutate by id,
with no locking in between. Two commands racing on the same list can act on shifted
positions (e.g. two "delete 1st task" commands may both resolve the same task, or the
second may hit the task that moved into position 1).
"""

import logging
from typing import Any, Dict, List, Optional
from pydantic import BaseModel, Field

from nltodo.database.repository import TaskRepository
from nltodo.engine.intent_parser import parse_intent
from nltodo.engine.prompts import build_intent_prompt
from nltodo.errors import InvalidInputError, EmptyResponseError, MalformedIntentError
from nltodo.integrations.classifier import IntentClassifier
from nltodo.models.constants import (
    TODO_NOT_FOUND_MESSAGE,
    TODO_DELETED_MESSAGE,
    TODO_DELETE_FAILED_MESSAGE,
    LOG_SNIPPET_CHARS,
)
from nltodo.models.intent import IntentKind, MalformedIntent, RecognizedIntent, UnrecognizedIntent
from nltodo.models.task import Task, TaskUpdate
from nltodo.models.task_factory import create_task_base, normalize_annotation

logger = logging.getLogger(__name__)


class CommandResult(BaseModel):
    """Per-command result descriptor."""
    success: bool = False
    todo: Optional[Task] = None
    todos: Optional[List[Task]] = None
    message: Optional[str] = None


class CommandOutcome(BaseModel):
    """Everything a command produced: classifier object, fresh list, and result."""
    classifier_output: Dict[str, Any] = Field(default_factory=dict)
    todos: List[Task] = Field(default_factory=list)
    result: CommandResult = Field(default_factory=CommandResult)

    def to_response(self) -> Dict[str, Any]:
        """Response body: the classifier object's keys plus `todos` and `result`."""
        return {
            **self.classifier_output,
            "todos": [todo.model_dump(mode="json", by_alias=True) for todo in self.todos],
            "result": self.result.model_dump(mode="json", by_alias=True, exclude_none=True),
        }


class CommandInterpreter:
    """Applies free-text commands (and direct edits) to the task store."""

    def __init__(self, repository: TaskRepository, classifier: IntentClassifier):
        self.repository = repository
        self.classifier = classifier

    def interpret(self, text: str) -> CommandOutcome:
        """Classify `text`, apply the resulting intent, and return the fresh list.

        Raises:
            InvalidInputError: text is empty or whitespace-only
            ClassifierUnavailableError: classifier call failed
            EmptyResponseError: classifier returned no text
            MalformedIntentError: classifier text is not a valid intent object
            StoreError: the store failed
        """
        if text is None or not text.strip():
            raise InvalidInputError("Text is required")
        text = text.strip()

        raw_text = self.classifier.classify(build_intent_prompt(text))
        if raw_text is None or not raw_text.strip():
            raise EmptyResponseError("No response from intent classifier")

        parsed = parse_intent(raw_text)
        if isinstance(parsed, MalformedIntent):
            logger.error(f"Rejecting command, classifier output unusable: {parsed.reason}")
            raise MalformedIntentError(parsed.reason, raw_text=parsed.raw_text)

        if isinstance(parsed, UnrecognizedIntent):
            logger.info(f"No action for unrecognized intent {parsed.intent!r}")
            result = CommandResult()
        else:
            result = self._dispatch(parsed, text)

        return CommandOutcome(
            classifier_output=parsed.payload,
            todos=self.repository.get_all(),
            result=result,
        )

    def handle_command(self, text: str) -> Dict[str, Any]:
        """interpret() rendered as the web response body."""
        return self.interpret(text).to_response()

    def _dispatch(self, intent: RecognizedIntent, text: str) -> CommandResult:
        if intent.kind == IntentKind.CREATE:
            return self._create(intent, text)

        # Positions are 1-based; missing or 0 means the classifier found no position.
        if not intent.task_position:
            logger.info(f"No task position for {intent.kind.value} intent; nothing to do")
            return CommandResult()

        index = intent.task_position - 1
        todo = self.repository.get_by_position(index, finished=False)
        if todo is None:
            logger.info(f"{intent.kind.value}: no unfinished task at position {intent.task_position}")
            return CommandResult(success=False, message=TODO_NOT_FOUND_MESSAGE)

        if intent.kind == IntentKind.DELETE:
            deleted = self.repository.delete(todo.id)
            return CommandResult(
                success=deleted,
                message=TODO_DELETED_MESSAGE if deleted else TODO_DELETE_FAILED_MESSAGE,
            )
        if intent.kind == IntentKind.UPDATE:
            return self._updated(todo.id, self._update_fields(intent))
        return self._updated(todo.id, {"finished": True})

    def _create(self, intent: RecognizedIntent, text: str) -> CommandResult:
        title = intent.title if intent.title and intent.title.strip() else text
        todo = self.repository.create(
            create_task_base(title=title, time=intent.time, date=intent.date)
        )
        logger.info(f"Created task {todo.id} from command: {text[:LOG_SNIPPET_CHARS]}")
        return CommandResult(success=True, todo=todo)

    def _update_fields(self, intent: RecognizedIntent) -> Dict[str, Any]:
        fields: Dict[str, Any] = {}
        if intent.title and intent.title.strip():
            fields["title"] = intent.title
        # Present-but-empty clears; absent leaves the stored value alone.
        if intent.has("time"):
            fields["time"] = normalize_annotation(intent.time)
        if intent.has("date"):
            fields["date"] = normalize_annotation(intent.date)
        return fields

    def _updated(self, task_id: str, fields: Dict[str, Any]) -> CommandResult:
        updated = self.repository.update_fields(task_id, fields)
        if updated is None:
            # Deleted between resolution and update
            return CommandResult(success=False, message=TODO_NOT_FOUND_MESSAGE)
        return CommandResult(success=True, todo=updated)

    # Direct passthroughs (no classifier involved)

    def list_todos(self) -> List[Task]:
        return self.repository.get_all()

    def edit(self, task_id: str, update: TaskUpdate) -> Optional[Task]:
        return self.repository.update_fields(task_id, update.to_fields())

    def remove(self, task_id: str) -> bool:
        return self.repository.delete(task_id)

    def finish(self, task_id: str) -> Optional[Task]:
        return self.repository.update_fields(task_id, {"finished": True})

"""FastAPI web application for nltodo."""

import logging
import os
from contextlib import asynccontextmanager
from datetime import datetime
from typing import List
from fastapi import Depends, FastAPI, HTTPException
from fastapi.responses import HTMLResponse
from pydantic import BaseModel, Field
from sqlalchemy.orm import Session

from nltodo.database.database import get_db, init_db, dispose_engine
from nltodo.database.repository import TaskRepository
from nltodo.engine.interpreter import CommandInterpreter
from nltodo.errors import (
    InvalidInputError,
    ClassifierError,
    StoreError,
)
from nltodo.integrations.classifier import IntentClassifier, get_classifier, configured_provider
from nltodo.models.constants import PROVIDER_OPENAI, SUBMIT_DEBOUNCE_MS
from nltodo.models.task import Task, TaskUpdate

logger = logging.getLogger(__name__)

VERSION = "0.1.0"


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Create the schema on startup and release the store's connections on shutdown."""
    init_db()
    logger.info("nltodo started")
    yield
    dispose_engine()


# Initialize FastAPI app
app = FastAPI(
    title="nltodo API",
    description="Todo list driven by natural-language commands",
    version=VERSION,
    lifespan=lifespan,
)


# Request/response models
class CommandRequest(BaseModel):
    """Free-text command."""
    text: str = Field(..., description="Natural-language command, e.g. 'delete 2nd task'")


class TodoListResponse(BaseModel):
    """Response for the todo list."""
    todos: List[Task]


class TodoResponse(BaseModel):
    """Response for a single todo."""
    todo: Task


class SuccessResponse(BaseModel):
    success: bool


def get_interpreter(
    db: Session = Depends(get_db),
    classifier: IntentClassifier = Depends(get_classifier),
) -> CommandInterpreter:
    """Per-request interpreter bound to the request's session."""
    return CommandInterpreter(TaskRepository(db), classifier)


@app.get("/", response_class=HTMLResponse)
async def root():
    """Single-page UI. Typing pauses for SUBMIT_DEBOUNCE_MS before a command is sent."""
    return INDEX_HTML.replace("__DEBOUNCE_MS__", str(SUBMIT_DEBOUNCE_MS))


@app.get("/health")
async def health():
    """Health check endpoint."""
    provider = configured_provider()
    if provider == PROVIDER_OPENAI:
        has_key = bool(os.getenv("OPENAI_API_KEY"))
    else:
        has_key = bool(os.getenv("GEMINI_API_KEY") or os.getenv("GEMINI_API"))
    return {
        "status": "ok",
        "version": VERSION,
        "timestamp": datetime.utcnow().isoformat(),
        "env": {
            "has_database_url": bool(os.getenv("DATABASE_URL")),
            "has_classifier_key": has_key,
            "provider": provider,
        },
    }


@app.get("/api/todos", response_model=TodoListResponse)
def list_todos(interpreter: CommandInterpreter = Depends(get_interpreter)):
    """List all todos, oldest first."""
    try:
        return TodoListResponse(todos=interpreter.list_todos())
    except StoreError as e:
        raise HTTPException(status_code=500, detail=f"Failed to fetch todos: {str(e)}")


@app.post("/api/todos")
def submit_command(request: CommandRequest, interpreter: CommandInterpreter = Depends(get_interpreter)):
    """Interpret a natural-language command and return the updated list."""
    try:
        return interpreter.handle_command(request.text)
    except InvalidInputError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except ClassifierError as e:
        raise HTTPException(status_code=502, detail=f"Failed to interpret command: {str(e)}")
    except StoreError as e:
        raise HTTPException(status_code=500, detail=f"Failed to apply command: {str(e)}")


@app.put("/api/todos/{todo_id}", response_model=TodoResponse)
def edit_todo(todo_id: str, update: TaskUpdate, interpreter: CommandInterpreter = Depends(get_interpreter)):
    """Directly edit a todo (no classifier)."""
    try:
        todo = interpreter.edit(todo_id, update)
    except StoreError as e:
        raise HTTPException(status_code=500, detail=f"Failed to update todo: {str(e)}")
    if todo is None:
        raise HTTPException(status_code=404, detail="Todo not found")
    return TodoResponse(todo=todo)


@app.delete("/api/todos/{todo_id}", response_model=SuccessResponse)
def delete_todo(todo_id: str, interpreter: CommandInterpreter = Depends(get_interpreter)):
    """Directly delete a todo (no classifier)."""
    try:
        deleted = interpreter.remove(todo_id)
    except StoreError as e:
        raise HTTPException(status_code=500, detail=f"Failed to delete todo: {str(e)}")
    if not deleted:
        raise HTTPException(status_code=404, detail="Todo not found")
    return SuccessResponse(success=True)


@app.patch("/api/todos/{todo_id}/finish", response_model=TodoResponse)
def finish_todo(todo_id: str, interpreter: CommandInterpreter = Depends(get_interpreter)):
    """Directly mark a todo finished (no classifier)."""
    try:
        todo = interpreter.finish(todo_id)
    except StoreError as e:
        raise HTTPException(status_code=500, detail=f"Failed to finish todo: {str(e)}")
    if todo is None:
        raise HTTPException(status_code=404, detail="Todo not found")
    return TodoResponse(todo=todo)


INDEX_HTML = """
<!DOCTYPE html>
<html>
<head>
    <title>nltodo</title>
    <style>
        body { font-family: Arial, sans-serif; max-width: 700px; margin: 50px auto; padding: 20px; }
        input[type=text] { width: 100%; padding: 10px; font-size: 16px; box-sizing: border-box; }
        button { padding: 4px 10px; margin-left: 4px; cursor: pointer; }
        ul { list-style: none; padding: 0; }
        li { padding: 8px; border-bottom: 1px solid #ddd; display: flex; align-items: center; }
        li .title { flex: 1; }
        li.finished .title { text-decoration: line-through; color: #888; }
        .meta { color: #666; font-size: 0.9em; margin-left: 8px; }
        #status { color: #666; min-height: 1.2em; margin: 8px 0; }
    </style>
</head>
<body>
    <h1>nltodo</h1>
    <input id="command" type="text" placeholder="e.g. meeting at 3pm tomorrow, delete 2nd task, finished task 1" autofocus>
    <div id="status"></div>
    <ul id="todos"></ul>

    <script>
        const DEBOUNCE_MS = __DEBOUNCE_MS__;
        const input = document.getElementById('command');
        const status = document.getElementById('status');
        let typingTimeout = null;
        let processing = false;

        function render(todos) {
            const list = document.getElementById('todos');
            list.innerHTML = '';
            todos.forEach(todo => {
                const li = document.createElement('li');
                if (todo.finished) li.className = 'finished';
                const title = document.createElement('span');
                title.className = 'title';
                title.textContent = todo.title;
                li.appendChild(title);
                const meta = document.createElement('span');
                meta.className = 'meta';
                meta.textContent = [todo.time, todo.date].filter(Boolean).join(' ');
                li.appendChild(meta);
                if (!todo.finished) {
                    li.appendChild(button('Done', () => finishTodo(todo.id)));
                    li.appendChild(button('Edit', () => editTodo(todo)));
                }
                li.appendChild(button('Delete', () => deleteTodo(todo.id)));
                list.appendChild(li);
            });
        }

        function button(label, onClick) {
            const b = document.createElement('button');
            b.textContent = label;
            b.onclick = onClick;
            return b;
        }

        async function fetchTodos() {
            const response = await fetch('/api/todos');
            const data = await response.json();
            render(data.todos || []);
        }

        async function submitCommand(text) {
            if (!text.trim() || processing) return;
            processing = true;
            status.textContent = 'Thinking...';
            try {
                const response = await fetch('/api/todos', {
                    method: 'POST',
                    headers: { 'Content-Type': 'application/json' },
                    body: JSON.stringify({ text: text.trim() }),
                });
                if (!response.ok) {
                    status.textContent = 'Sorry, that command could not be processed.';
                    return;
                }
                const data = await response.json();
                if (data.todos) render(data.todos);
                status.textContent = (data.result && data.result.message) || '';
                input.value = '';
            } catch (error) {
                status.textContent = 'Sorry, that command could not be processed.';
            } finally {
                processing = false;
            }
        }

        async function finishTodo(id) {
            await fetch(`/api/todos/${id}/finish`, { method: 'PATCH' });
            fetchTodos();
        }

        async function deleteTodo(id) {
            await fetch(`/api/todos/${id}`, { method: 'DELETE' });
            fetchTodos();
        }

        async function editTodo(todo) {
            const title = prompt('Title', todo.title);
            if (title === null || !title.trim()) return;
            const time = prompt('Time (empty to clear)', todo.time || '');
            const date = prompt('Date (empty to clear)', todo.date || '');
            await fetch(`/api/todos/${todo.id}`, {
                method: 'PUT',
                headers: { 'Content-Type': 'application/json' },
                body: JSON.stringify({ title: title.trim(), time: time || null, date: date || null }),
            });
            fetchTodos();
        }

        input.addEventListener('input', () => {
            if (typingTimeout) clearTimeout(typingTimeout);
            const value = input.value;
            typingTimeout = setTimeout(() => {
                if (value.trim()) submitCommand(value);
            }, DEBOUNCE_MS);
        });

        fetchTodos();
    </script>
</body>
</html>
"""


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)

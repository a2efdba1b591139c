"""Shared test fixtures."""

from __future__ import annotations

from pathlib import Path
from unittest.mock import AsyncMock

import pytest

from e2egen.shared.openai_client import GenerationClient

LOGIN_FORM = """\
import React, { useState } from 'react';
import axios from 'axios';
import { Link } from './Link';

export default function LoginForm() {
  const [email, setEmail] = useState('');
  const [loginError, setLoginError] = useState(null);

  const submit = (e) => {
    e.preventDefault();
    axios.post('/api/login', { email }).catch(() => setLoginError('failed'));
  };

  return (
    <form onSubmit={submit} data-testid="login-form">
      <label id="email-label">Email address</label>
      <input type="email" name="email" aria-labelledby="email-label" required />
      <input type="password" name="password" minLength="8" />
      <button data-testid="submit-btn" onClick={submit}>Submit</button>
      <Link href="/forgot">Forgot password?</Link>
    </form>
  );
}
"""

BUTTON = """\
import React from 'react';

export function Button({ label, onClick }) {
  return <button className="btn" onClick={onClick}>{label}</button>;
}
"""

UTILS = """\
export const add = (a, b) => a + b;
"""


@pytest.fixture
def sample_codebase(tmp_path: Path) -> Path:
    """Create a small React codebase for pipeline tests."""
    root = tmp_path / "app"
    components = root / "src" / "components"
    components.mkdir(parents=True)
    (components / "LoginForm.jsx").write_text(LOGIN_FORM)
    (components / "Button.jsx").write_text(BUTTON)
    (components / "Button.test.jsx").write_text("test('x', () => {});")
    (root / "src" / "utils.js").write_text(UTILS)
    (root / "src" / "index.js").write_text("import './utils';\n")

    nm = root / "node_modules" / "react"
    nm.mkdir(parents=True)
    (nm / "index.js").write_text("module.exports = {};")
    return root


@pytest.fixture
def tmp_config(tmp_path: Path) -> Path:
    """Write a minimal valid config YAML and return its path."""
    cfg = tmp_path / "e2egen.yml"
    cfg.write_text(
        """\
output_dir: "{out}"
include_patterns:
  - "src/**/*.jsx"
exclude_patterns:
max_tokens_per_request: 4000
""".format(out=str(tmp_path / "tests-out"))
    )
    return cfg


@pytest.fixture
def mock_openai_client() -> GenerationClient:
    """Return a GenerationClient with a mocked OpenAI SDK underneath."""
    client = GenerationClient.__new__(GenerationClient)
    client.model = "gpt-4o"
    client.max_retries = 3
    client._client = AsyncMock()
    return client


@pytest.fixture
def login_form_source() -> str:
    return LOGIN_FORM

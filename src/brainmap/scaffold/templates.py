"""Source templates stamped by the scaffold generator."""

from __future__ import annotations

import textwrap

PROCESS_TEMPLATE = textwrap.dedent(
    '''\
    """{name} process of the {domain} domain."""

    from __future__ import annotations

    from brainmap.contracts import Process


    class {name}(Process):
        """{name}."""

        chain = {chain}
        tasks = [{tasks}]
    '''
)

TASK_TEMPLATE = textwrap.dedent(
    '''\
    """{name} task of the {domain} domain."""

    from __future__ import annotations

    from brainmap.contracts import {bases_import}


    class {name}({bases}):
        """{name}."""

        def handle(self) -> "{name}":
            return self
    '''
)

QUERY_TEMPLATE = textwrap.dedent(
    '''\
    """{name} query of the {domain} domain."""

    from __future__ import annotations

    from typing import Any

    from brainmap.contracts import Query


    class {name}(Query):
        """{name}."""

        def __init__(self) -> None:
            pass

        def handle(self) -> Any:
            raise NotImplementedError
    '''
)

TEST_TEMPLATE = textwrap.dedent(
    '''\
    # pytest only collects this file when python_files includes "{collect_glob}",
    # e.g. python_files = ["test_*.py", "{collect_glob}"] under [tool.pytest.ini_options].
    from {module} import {name}


    def test_{snake}_is_importable() -> None:
        assert {name}.__name__ == "{name}"
    '''
)

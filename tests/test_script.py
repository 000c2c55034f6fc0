from __future__ import annotations

from coroload.loader.script import assemble_script

SOURCE = "var helper = require('./helper');\nmodule.exports = helper;\n"


def test_script_wraps_rewritten_body() -> None:
    script = assemble_script("utils/math.js", SOURCE)
    pre, body, post = script.split("\n\n", 2)

    assert body == "var helper = yield require('./helper');\nmodule.exports = helper;"

    # preamble: local module container, normalizer, loader, coroutine opener
    assert pre.startswith("console.log('Loading: ' + \"utils/math.js\");")
    assert "var module = {" in pre
    assert "function resolve(path)" in pre
    assert "function require(id)" in pre
    assert "script.src = \"/require\" + '/' + id;" in pre
    assert "setTimeout(waitForIt, 10);" in pre
    assert "script.onerror" in pre
    assert pre.endswith("run(function*() {")

    # postamble: cache write keyed by the exact requested path
    assert 'window.__cache["utils/math.js"] = module.exports;' in post
    assert "if (error) { throw error; }" in post


def test_preamble_resolves_against_requesting_module_directory() -> None:
    nested = assemble_script("utils/math.js", SOURCE)
    top = assemble_script("index.js", SOURCE)

    assert "src = \"utils\" + '/' + id;" in nested
    assert "if (id.charAt(0) === '.' && \"\")" in top


def test_preamble_is_a_single_line() -> None:
    script = assemble_script("index.js", "")
    pre = script.split("\n\n", 1)[0]

    assert "\n" not in pre
    assert "//" not in pre.replace("'/'", "")


def test_settings_flow_into_script() -> None:
    script = assemble_script(
        "a.mjs",
        "",
        load_prefix="/modules/",
        extension=".mjs",
        poll_interval_ms=25,
        runtime_global="rt",
    )

    assert 'window["rt"].run' in script
    assert "script.src = \"/modules\" + '/' + id;" in script
    assert "setTimeout(waitForIt, 25);" in script
    assert 'src.slice(-4) !== ".mjs"' in script


def test_module_path_is_escaped() -> None:
    script = assemble_script("it's/odd.js", "")

    assert 'window.__cache["it\'s/odd.js"] = module.exports;' in script

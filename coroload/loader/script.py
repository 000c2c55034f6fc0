from __future__ import annotations

import json
from string import Template

from coroload.loader.paths import DEFAULT_EXTENSION, split_request
from coroload.loader.rewrite import rewrite_requires

DEFAULT_LOAD_PREFIX = "/require"
DEFAULT_POLL_INTERVAL_MS = 10
DEFAULT_RUNTIME_GLOBAL = "coroload"

# Both templates are collapsed onto a single line, so every statement ends
# with `;` or a brace and nothing uses `//` comments.
_PREAMBLE = Template(
    """
console.log('Loading: ' + $id);
(function() {
var run = window[$runtime].run;
var exports = {};
var module = {
    get exports() { return exports; },
    set exports(value) { exports = value; }
};
function resolve(path) {
    return path.split('/').reduce(function(memo, current) {
        if (current === '' || current === '.') { return memo; }
        if (current === '..') { return memo.slice(0, -1); }
        return memo.concat(current);
    }, []).join('/');
}
function loadScript(id) {
    return function(callback) {
        var done = false;
        var script = document.createElement('script');
        script.src = $prefix + '/' + id;
        script.onload = function() {
            if (done) { return; }
            done = true;
            (function waitForIt() {
                if (window.__cache && window.__cache[id] !== undefined) {
                    return callback(null, window.__cache[id]);
                }
                setTimeout(waitForIt, $poll);
            })();
        };
        script.onerror = function() {
            if (done) { return; }
            done = true;
            callback(new Error('Failed to load module: ' + id));
        };
        document.head.appendChild(script);
    };
}
function require(id) {
    return run(function*() {
        var src = id;
        if (id.charAt(0) === '.' && $parent) { src = $parent + '/' + id; }
        if ($ext && src.slice(-$extlen) !== $ext) { src += $ext; }
        src = resolve(src);
        if (window.__cache && window.__cache[src] !== undefined) {
            return window.__cache[src];
        }
        return yield loadScript(src);
    });
}
run(function*() {
"""
)

_POSTAMBLE = Template(
    """
console.log('Loaded: ' + $id);
window.__cache = window.__cache || {};
window.__cache[$id] = module.exports;
})(function(error) {
    if (error) { throw error; }
});
})();
"""
)


def _collapse(text: str) -> str:
    return "".join(line.strip() for line in text.splitlines())


def assemble_script(
    module_path: str,
    source: str,
    *,
    load_prefix: str = DEFAULT_LOAD_PREFIX,
    extension: str = DEFAULT_EXTENSION,
    poll_interval_ms: int = DEFAULT_POLL_INTERVAL_MS,
    runtime_global: str = DEFAULT_RUNTIME_GLOBAL,
) -> str:
    """Wrap a module's source into a self-executing browser script.

    The preamble gives the module a local `module`/`exports` pair and a
    `require` that resolves ids against the module's own directory, serves
    cached exports from `window.__cache` and otherwise injects a script tag
    for the dependency and suspends until it has been cached. The rewritten
    body runs as a coroutine; the postamble stores `module.exports` in the
    cache under `module_path` exactly as requested.
    """

    parent, _ = split_request(module_path)
    literals = {
        "id": json.dumps(module_path),
        "runtime": json.dumps(runtime_global),
        "prefix": json.dumps(load_prefix.rstrip("/")),
        "poll": str(int(poll_interval_ms)),
        "parent": json.dumps(parent),
        "ext": json.dumps(extension),
        "extlen": str(len(extension)),
    }
    pre = _collapse(_PREAMBLE.substitute(literals)) + "\n\n"
    body = rewrite_requires(source) + "\n\n"
    post = _collapse(_POSTAMBLE.substitute(literals))
    return pre + body + post

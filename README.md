# edwood

Building blocks of an Acme-style text editor, usable on their own from Python.
The package has no dependencies beyond the standard library.

## Modules

### `edwood.editparse` — Edit command parser

Parses commands of the sam-style Edit language (`x/re/`, `s/a/b/g`,
`,x {\n i/@/\n}`, `m.`, `B file`, …) into trees of `Cmd` nodes whose
addresses are trees of `Addr` nodes.

- `parse_commands(text)` returns a list of every command in `text`
  (a final newline is added if missing).
- `CmdParser(text)` parses one command at a time with `parse()`, and exposes
  `simpleaddr()`, `compoundaddr()`, `collecttoken(end)`, `collecttext()`,
  `getregexp(delim)`, `getrhs(delim, cmd)` and `getnum(signok)`. An empty
  regular expression refers back to the parser's `lastpat`.
- `cmdlookup(c)` returns the `CommandSpec` for a command character, or `None`;
  `COMMANDS` holds them all. `okdelim(c)` tells whether a character may
  delimit text or a regular expression.
- Errors raise `EditParseError`, or its subclasses `InvalidCommandError`
  (`"unknown command j"`) and `BadDelimiterError` (`"bad delimiter x"`).

```python
from edwood.editparse import parse_commands

[cmd] = parse_commands("s/short/long/g")
print(cmd.cmdc, cmd.re, cmd.text, cmd.flag)   # s short long g
```

### `edwood.dumpfile` — saved editor state

`Content` holds the current directory, fonts, row tag, `Column`s and
`Window`s (each with a `WindowType` and `Text` tag and body).

- `Content.encode(stream)` writes versioned, tab-indented JSON;
  `Content.save(path)` writes it to a file created with mode 0600.
- `decode(stream)` and `load(path)` read it back, checking the version.
- `load_legacy(path, home)` reads the older line-based dump format; `home`
  stands in for a command window's missing directory.
- Malformed input raises `DumpfileError`.

### `edwood.complete` — file name completion

`complete(directory, prefix)` returns a `Completion` with `advance`,
`complete`, `string` (the unambiguous extension, ending in a separator or a
blank when exactly one file matches), `nmatch` and `filenames`. A prefix
containing a path separator raises `ValueError`; an unreadable directory
raises `OSError`.

### `edwood.scroll` — mouse wheel scroll amount

`ScrollSetting.parse(value)` reads a setting such as `"3"` (lines) or
`"50%"` (percent of the window, capped at 100); anything invalid gives the
default of one line. `lines_for(maxlines)` applies it.
`mouse_scroll_size(maxlines, setting=None)` uses `$mousescrollsize`, read
once, when no setting is given.

```python
from edwood.scroll import ScrollSetting
print(ScrollSetting.parse("50%").lines_for(200))   # 100
```

### `edwood.disk` — rune block store

`Disk` keeps blocks of runes in a temporary file and can be used as a context
manager. `new_block(n)`, `release(block)`, `read(block, n)` (returns a
string) and `write(block, runes)` (returns the block now holding them, which
changes when the size bucket changes). `ntosize(n)` gives the rounded block
size and bucket index for `n` runes.

### `edwood.qid` — file server identifiers

`FileId` enumerates the served files. `qid_path(window_id, file_id)` packs a
window id and file id into a path; `window_of(path)` and `file_of(path)`
unpack it. `is_mountpoint(filename, mtpt)` tells whether a (cleaned) file
name lies at or below a mount point.

```python
from edwood.qid import FileId, qid_path, window_of, file_of
p = qid_path(5, FileId.QWBODY)
print(p, window_of(p), file_of(p).name)   # 1291 5 QWBODY
```

### `edwood.commands` — external command bookkeeping

`CommandTracker` keeps the list of running `Command`s and a `tag` string
listing their names. `started(command)`, `exited(state)`, `kill(name)` and
`kill_all()` update it; failures and unknown names are recorded in
`warnings`. A command that exits before it is reported as started is handled.
`ProcessState.from_popen(process)` waits for a `subprocess.Popen` and
describes how it ended.

## What the package does not do

It is a set of libraries, not an editor: there is no command to run, no
window or screen, no file server, and no evaluation of addresses or execution
of parsed Edit commands against text.

## Tests

Install with the `test` extra and run `pytest`.
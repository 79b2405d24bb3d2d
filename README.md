# pipeshell

`pipeshell` is the execution core of a small shell. It takes commands
that have already been split into words and redirections and runs them
the way a POSIX shell would:

- builtins: `echo` (with `-n`), `cd`, `pwd`, `env`, `export`, `unset`, `exit`
- input and output redirections (`<`, `>`, `>>`) and here-document files
- pipelines of several commands, each stage feeding the next
- lookup of external programs through `PATH`, with the diagnostics
  `command not found` (127), `No such file or directory` (127),
  `Is a directory` (126) and `Permission denied` (126)
- `128 + signal` as the status of a program killed by a signal

## What it does not do

The package has no command-line reader. There is no prompt, no line
editing or history, no tokenizer, no quote handling or `$VAR`
expansion, no collection of here-document text and no signal setup.
The caller builds `SimpleCommand` objects itself (and writes any
here-document to a file) before handing them to the executor. There
is no console command to start.

## Describing commands

`pipeshell.command` holds the parsed form of a command:

```python
from pipeshell.command import RedirectKind, Redirection, SimpleCommand

cmd = SimpleCommand(
    argv=["grep", "-i", "error"],
    redirections=[
        Redirection(RedirectKind.IN, "log.txt"),
        Redirection(RedirectKind.APPEND, "'found.txt'"),
    ],
)
cmd.name        # "grep"
cmd.words       # ["grep", "error"]   - name and non-flag arguments
cmd.flags       # ["-i"]              - arguments starting with "-"
cmd.exec_argv() # ["grep", "error", "-i"]
```

`exec_argv()` places flags after the plain words when a program is
started. `heredoc_file` names a file whose contents become the
command's input. Redirection targets have all quote characters removed
(`unquote_filename`) before they are opened. `is_invalid()` is true for
a command with no name, an empty name or a name containing `=`; such a
command does nothing and gives status 0.

## The environment

`pipeshell.environment.Environment` holds the shell's variables as
ordered `KEY=value` entries. An entry without `=` is exported but has no
value: it appears in `export` listings but not in `env` output.

```python
import os
from pipeshell.environment import Environment, env_key, is_valid_identifier

env = Environment(os.environ)          # a mapping or an iterable of entries
env.export("GREETING=hello")
env.export("MARKER")                   # ValueError for an invalid name

env.get("GREETING")                    # "hello"
env.find("MARKER")                     # index of the entry, or None
env.unset(["GREETING"])                # removes entries that have a value
env.home()                             # value of HOME, or None
env.search_paths()                     # PATH split on ":", empties dropped
env.find_executable("ls")              # first existing dir/ls, or None

env.declarations()                     # ['declare -x KEY="value"', ...] sorted
env.visible()                          # entries with a value, in order
env.as_dict()                          # mapping for child processes

is_valid_identifier("1ABC")            # False
env_key("A=b=c")                       # "A"
```

## Running commands

`pipeshell.executor` runs a list of commands as a pipeline and returns
the status of the last stage:

```python
from pipeshell.executor import Executor, execute

status = execute([cmd], env)                 # uses sys.stdout and sys.stderr

executor = Executor(env, stdout, stderr)     # any text streams
status = executor.run(pipeline)
status = executor.run_single(cmd)
status = executor.run_external(cmd, stdin=b"input\n", stdout=stdout)
```

A lone `cd`, `export`, `unset` or `exit` runs in the shell itself, so its
effect on the environment or working directory lasts; redirections are
not applied to it. A lone `echo`, `pwd` or `env` runs with its
redirections applied. Inside a pipeline, `cd`, `unset` and `exit` are
skipped (status 0), and `export` with names changes nothing; `export`
without names, `echo`, `pwd` and `env` produce output for the next stage.

Errors are written to the error stream as `minishell: <name>: <message>`.

## Builtins

`pipeshell.builtins` provides `echo`, `cd`, `pwd`, `env_command`,
`export`, `unset` and `exit_builtin`. Each takes
`(command, env, stdout, stderr)` and returns an exit status, except
`exit_builtin`, which prints `exit` and raises `ShellExit` carrying the
status the shell should end with:

- no argument: 0
- a numeric argument: its value modulo 256 (`exit -1` gives 255)
- a non-numeric argument or one outside the signed 64-bit range: 2,
  after `numeric argument required`
- more than one argument: `too many arguments` is reported and the
  status is 1

`echo`, `export`, `unset` and `env` reject flags with status 1, except
that `echo` accepts `-n`, `-nn` and so on (`is_n_flag`) as its first
argument. `is_builtin(name)` tells whether a name is one of these seven.

## Redirections and program lookup

`pipeshell.redirect.open_streams(command, stdin, stdout)` opens the
command's output files first, then the here-document file and input
files, and returns a `Streams` object (a context manager that closes
what it opened). A failure raises `RedirectionError`, whose `filename`,
`message` and `status` (1) describe it.

`pipeshell.resolve.resolve_command(command, env)` returns the path of
the program to run. Names starting with `/`, `./` or `../`
(`is_direct_path`) are used as given; other names are looked up along
`PATH`. Problems raise `CommandError` with the status the shell reports.

## Numbers

`pipeshell.numeric` holds the argument parsing used by `exit`:
`is_numeric` checks for an optionally signed run of ASCII digits;
`parse_exit_status` reduces a value modulo 256 keeping its sign
(`"-1"` gives `-1`) and raises `ValueError` for values that do not fit
in a signed 64-bit integer; `atoi` parses a leading integer with C
library conventions, truncated to 32 bits.
# saturnus

A Lua 5.3 code generator for the Saturnus language, working on Saturnus
syntax trees, together with `titan`, a small build tool that compiles and
links Saturnus projects.

## Installation

```
pip install .
```

For running the test suite:

```
pip install ".[test]"
pytest
```

## Syntax trees

The node classes live in `saturnus.ast`: expressions such as `Number`,
`SatString`, `Boolean`, `Identifier`, `Call`, `Member`, `ArrayAccess`,
`Bop`, `Uop`, `LambdaExpr`, `MapLiteral`, `ArrayLiteral` and `TupleLiteral`.
Statements such as `Let`, `Assignment`, `IfStatement`, `For`, `While`,
`Loop`, `Fn`, `ClassDef`, `Return`, `Break`, `Skip` and `Use` are there too.
Definition modifiers (`is_pub`, `is_static`, `is_partial`) are held in a
`DefModifiers` bit mask.

`saturnus.builders` has small helpers: `add_member`, `array_access`,
`as_expr`, `to_expr` and `collect_leaves`. The last one lists the names
bound by a destructuring pattern.

## The Lua back end

`saturnus.lua.compiler.LuaCompiler` turns a list of statements into Lua
source:

```python
from saturnus.ast import Identifier, Let, Number
from saturnus.compiler import CompilerOptions, ModuleType
from saturnus.lua.compiler import LuaCompiler

program = [Let(Identifier("x"), Number(1))]
options = CompilerOptions(module_type=ModuleType.PUB_AS_GLOBAL)
ir = LuaCompiler().compile(program, options)
print(str(ir))   # "\nlocal x = 1;"
```

`compile(program, options=None, location=None)` returns a
`saturnus.compiler.SaturnusIR`. Calling `str()` on it gives the Lua text.

With the default `ModuleType.SATURNUS`, the output starts by making sure
`__modules__` exists. When a `location` path is given, it also creates one
nested table per path segment, with the segment names sanitised to
identifiers. Public definitions are then exported into that table.

Other module types behave as follows:

- `PUB_AS_GLOBAL` leaves public functions and classes global.
- `LOCAL_MODULE_RETURN` raises `CompilerError` when a symbol would be exported.

Other options on `CompilerOptions`:

- `use_std_collections`: wraps map, array and tuple literals in `std.Map`,
  `std.Array` and `std.Tuple`.
- `unit_interop` (on by default): emits the unit value as `nil`. When it is
  off, the unit value is emitted as `std.Unit()`.
- `skip_loop_interop` and `override_mod_path`: carried on the options; code
  generation does not consult them.

Range loops and two-name `pairs`/`ipairs` loops always use Lua's native
`for` forms.

Errors raised during compilation are subclasses of
`saturnus.compiler.CompilerError`, for example `SaturnusSyntaxError` and
`ParsingError`.

The back end is built in layers:

- `saturnus.lua.expressions.ExpressionEmitter` handles expressions. The
  module also provides `translate_identifier` and `native_operator`.
- `saturnus.lua.statements.StatementEmitter` adds statements on top of that.
- `LuaCompiler` adds classes and module setup.

Generated code is laid out with `saturnus.code.IndentedBuilder`:

```python
from saturnus.code import IndentedBuilder

builder = IndentedBuilder()
builder.write("do").push().line().write("local x = 1;").pop().line().write("end")
print(builder.build())
```

### Compiler command-line arguments

`saturnus.cli_options.build_parser()` builds an `argparse` parser with the
`compile`, `run` and `std-output` subcommands.
`options_from_args(args)` turns the parsed `compile` arguments into
`CompilerOptions`.

## titan

`titan` builds a project described by a `titan.toml` file:

```toml
[package]
name = "hello"
version = "1.0.0"

[dependencies]
utils = { git = "https://git.example.com/utils.git", version = "1.0.0" }

[linking]
no_std = false
mode = "Collect"
```

Build it from the project root:

```
titan compile
```

or point at a manifest elsewhere (`run` does the same as `compile`):

```
titan run --project path/to/titan.toml
```

A build runs these steps:

1. Clones git dependencies into `target/deps` and records them in
   `titan.lock`, a JSON file.
2. Compiles every file under `src/` into `target/objects/`.
3. Links the objects into `target/<name>.lua`. Each object is wrapped in a
   `do ... end` block, and the standard library comes first unless `no_std`
   is set.

Only git dependencies and the `Collect` link mode are supported. Other
dependency kinds and link modes stop the build with an error. The `new`,
`init`, `add` and `test` commands are accepted but only report that they are
not available, with exit status 1.

The manifest model is in `saturnus.titan.config`, including `load_project`
and `parse_project`. The lock database is in `saturnus.titan.lockdb`
(`LockDb`, `PackageRecord`, `package_id`).

## What this package does not do

- It has no parser for Saturnus source text. The back end compiles syntax
  trees that you build from `saturnus.ast`.
- It provides no `saturnc` command and cannot run the generated Lua.
- `titan` compiles each file and produces the standard library by starting
  an external `saturnc` executable, which must be on your `PATH`.
- Dependencies are fetched with `git`, which must also be installed.
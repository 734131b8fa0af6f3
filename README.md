# makedot

makedot reads the database that GNU make prints and turns it into Graphviz graphs. It can draw the graph of targets, the graph of variables, or both.

## Installation

```
pip install .
```

makedot needs no third-party libraries. The `--png` option runs the Graphviz `dot` program, so `dot` must be on your `PATH` if you use it.

## Usage

First dump the make database. Then give the dump to `makedot`:

```
make -pnq all > make.db
makedot --targets make.db
makedot --variables make.db
```

To read the database from standard input, pass `-` as the path:

```
make -pnq all | makedot --targets -
```

The goal is the first word of `MAKECMDGOALS`. If that variable is empty, the goal is the value of `.DEFAULT_GOAL`. The output files go in the current directory and are named after the goal:

- `<goal>.targets.dot`
- `<goal>.variables.dot`

If you give neither `--targets` nor `--variables`, the database is read but no file is written.

### Options

- `--targets`: write the graph of targets and their prerequisites. You cannot combine it with `--variables`.
- `--variables`: write the graph of variable references. It starts from the variable that has the same name as the goal and follows the variables it refers to (`$(NAME)`, `${NAME}` or `$NAME`).
- `--maxthreads N`: a non-negative number, 3 by default. The targets graph is made of every path from the goal down to a leaf. Each path shares no inner node with any other path. These paths are grouped by end node and length. When a group has more than `N` such paths, some of them are folded into one blue summary node.
- `--nodraw PATTERN`: a path that reaches a node whose name contains `PATTERN` stops there. Nodes before that point may still be listed, but none of that path's edges are drawn. You can repeat this option.
- `--rewrite SUFFIX`: in the written `.dot` file, the value of every make variable whose name ends in `SUFFIX` is replaced with `$(NAME)`. The longest values are replaced first. After that, if an environment variable named `SUFFIX` is set, its value is replaced with `$SUFFIX`. You can repeat this option.
- `--png`: also render each `.dot` file to a `.png` by running `dot -Tpng`.
- `--debug`: print the parsed data as JSON and each generated graph to standard output. Progress messages go to standard error.

If the database cannot be read or a file cannot be written, makedot prints `Error: ...` to standard error and exits with status 1.

### Node styles in the targets graph

- The goal is red. It is also filled when it is phony.
- Phony targets are green and filled.
- Intermediate targets are orange and dashed.
- Targets with no prerequisites are green.
- Other targets are orange.
- Summary nodes for folded paths are blue.

Edges point from a prerequisite to the target that needs it.

## Library use

```python
from makedot.parser import parse_db
from makedot.dot import render_targets, render_variables, write_dot

data = parse_db("make.db")          # or "-" for standard input
write_dot("graph.dot", render_targets(data, 3, []))
print(render_variables(data))
print(data.to_json())
```

- `makedot.parser`
  - `parse_db(path)` reads a database file.
  - `parse_stream(lines)` reads any iterable of text lines.
  - `scan_for_targets(text)` splits a prerequisite list into target names.
  - `MakeData` holds the goal, the target and variable dependencies, the phony and intermediate targets, and the variable values.
- `makedot.dot`
  - `render_targets` and `render_variables` return DOT text.
  - `write_dot` writes that text to a file.
  - `render_png` runs Graphviz on a file.
- `makedot.graph`
  - `build_target_graph` and `build_var_graph` turn the dependency mappings into adjacency dicts. Each edge runs from a prerequisite or referenced variable to the node that depends on it.
- `makedot.cli`
  - `do_rewrites` and `rewrite_file` make the `--rewrite` substitutions.
  - `main(argv=None)` runs the command.
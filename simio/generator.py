"""
Random meta-data workload generator.

Writes a program meta-data file that parse_meta_data accepts, e.g.

    python -m simio.generator workload.mdf --programs 5 --seed 7
"""
import argparse
import random
from typing import List, Optional

from core.operation import VALID_RESOURCES, OperationKind
from simio.parser import META_END, META_START, SIM_END, SIM_START


WORK_KINDS = (OperationKind.PROCESSING, OperationKind.INPUT, OperationKind.OUTPUT)
MAX_CYCLES = 20
TOKENS_PER_LINE = 6


def generate_operation(rng: random.Random) -> str:
    kind = rng.choice(WORK_KINDS)
    resource = rng.choice(VALID_RESOURCES[kind])
    return f"{kind.value}({resource}){rng.randint(1, MAX_CYCLES)}"


def generate_programs(count: int, rng: Optional[random.Random] = None,
                      max_operations: int = 10) -> List[List[str]]:
    rng = rng or random.Random()
    programs = []
    for _ in range(count):
        body = [generate_operation(rng) for _ in range(rng.randint(1, max_operations))]
        programs.append(['A(start)0'] + body + ['A(end)0'])
    return programs


def render_meta_data(programs: List[List[str]]) -> str:
    tokens = [SIM_START] + [tok for program in programs for tok in program] + [SIM_END]
    lines = []
    for i in range(0, len(tokens), TOKENS_PER_LINE):
        lines.append('; '.join(tokens[i:i + TOKENS_PER_LINE]))
    # every line but the last ends with a separator
    text = ';\n'.join(lines)
    return f"{META_START}\n{text}.\n{META_END}\n"


def main(argv=None) -> None:
    parser = argparse.ArgumentParser(description='Generate a random program meta-data file')
    parser.add_argument('output', help='Path of the meta-data file to write')
    parser.add_argument('-n', '--programs', type=int, default=5, help='Number of programs')
    parser.add_argument('-m', '--max-operations', type=int, default=10,
                        help='Upper bound on work operations per program')
    parser.add_argument('-s', '--seed', type=int, default=None, help='Random seed')
    args = parser.parse_args(argv)

    programs = generate_programs(args.programs, random.Random(args.seed), args.max_operations)
    with open(args.output, 'w') as fh:
        fh.write(render_meta_data(programs))
    print(f"wrote {len(programs)} programs to {args.output}")


if __name__ == '__main__':
    main()

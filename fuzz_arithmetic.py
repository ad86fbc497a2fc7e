import math
import random
import re
import warnings

from memcalc.errors import CalcError
from memcalc.evaluator import evaluate
from memcalc.memory import MemoryStore
from memcalc.tokenizer import tokenize

warnings.filterwarnings("ignore")

PIECES = ["0", "1", "2", "7", "0.5", "12.25", "+", "-", "*", "/", "(", ")"]


def eval_py(code: str) -> float | str:
    try:
        return float(eval(code))
    except ZeroDivisionError:
        return "division by zero"
    except Exception as e:
        return str(e)


def eval_my(code: str) -> float | str:
    try:
        return evaluate(tokenize(code), MemoryStore())
    except CalcError as e:
        return str(e)


if __name__ == "__main__":

    def generate(length: int) -> str:
        return " ".join(random.choices(PIECES, k=length))

    while True:
        code = generate(random.randint(1, 12))

        if re.findall(r"(^|[-+*/(])\s*[-+]", code):
            continue  # avoid generating unary signs (1 * - 2)

        if re.findall(r"\*\s*\*|/\s*/", code):
            continue  # avoid generating powers and int division (10 ** 4, 10 // 3)

        if re.findall(r"\(\s*\)", code):
            continue  # avoid generating empty tuples

        res_py = eval_py(code)
        if res_py == "division by zero":
            continue  # Python raises where the evaluator follows IEEE754

        res_my = eval_my(code)
        if isinstance(res_py, float) and isinstance(res_my, float) and math.isclose(res_my, res_py):
            continue
        if isinstance(res_py, str) and isinstance(res_my, str):
            continue
        print(f"{code!r}\npy: {res_py}\nmy: {res_my}\n\n")

"""
Calculator: a small arithmetic command built on docket.

Run it as ``calculate <method> [options...]`` (or ``python main.py ...``):

    calculate multiplesSum -divisors=[3,5] -max=10
    calculate power -x=2 -y=10
    calculate fibonacciRecursion -firstNumber=0 -secondNumber=1 -max=10

Methods raise ValueError on bad input; the dispatcher reports those as errors
followed by the help text.
"""
import itertools
import json
import logging
import math
import os
from typing import final

from rich.console import Console
from rich.logging import RichHandler

from .colors import Color
from .dispatcher import Command, invoke


def _summary(series):
    return "found sum %d for %d numbers %s" % (sum(series), len(series), json.dumps(series, separators=(",", ":")))


# Repeated addition costs about x * y steps.
_POWER_BUDGET = 10 ** 7


class Calculator(Command):
    """
    Arithmetic assignment exposed as a CLI.

    :title:   Docket Calculator
    :version: v1.01
    :usage:   calculate <method> [options...]
    """

    def _validate(self, divisors, max):
        if not isinstance(divisors, list) or not all(
            isinstance(divisor, int) and not isinstance(divisor, bool) for divisor in divisors
        ):
            raise ValueError("Parameter -divisors should be a list of natural numbers")
        if max <= 1:
            raise ValueError("Parameter -max should be greater than 1")
        for divisor in divisors:
            if divisor < 1 or divisor >= max:
                raise ValueError("Numbers in -divisors should be between 1 and %d" % (max - 1))

    @final
    def multiplesSum(self, divisors, max):
        """
        The sum of all natural numbers below -max that are multiples of divisors
            ex calculate multiplesSum -divisors=[3,4] -max=1000

        :param list divisors: Array of natural numbers
        :param int max: The maximum number that a multiple cannot reach
        """
        self._validate(divisors, max)
        return sum(number for number in range(max) if any(number % divisor == 0 for divisor in divisors))

    @final
    def multiplesSumFormula(self, divisors, max):
        """
        Same as multiplesSum, without walking every number (inclusion-exclusion)
            ex calculate multiplesSumFormula -divisors=[3,5] -max=1000

        :param list divisors: Array of natural numbers
        :param int max: The maximum number that a multiple cannot reach
        """
        self._validate(divisors, max)
        divisors = sorted(set(divisors))
        total = 0
        for size in range(1, len(divisors) + 1):
            for subset in itertools.combinations(divisors, size):
                step = math.lcm(*subset)
                count = (max - 1) // step
                # Odd-sized subsets add, even-sized subsets remove double counts.
                total += (-1) ** (size + 1) * step * count * (count + 1) // 2
        return total

    @final
    def power(self, x, y):
        """
        The power of x to index y
        Uses repeated addition only, so x * y is capped.
            ex calculate power -x=2 -y=2

        :param int x: The base to use
        :param int y: The exponent
        """
        if x < 0 or y < 0:
            raise ValueError("Parameters -x -y should be natural numbers")
        if y == 0:
            return 1
        if x <= 1:
            return x
        if x * y > _POWER_BUDGET:
            raise ValueError("Parameters -x -y are too large, x * y should not exceed %d" % _POWER_BUDGET)
        # Repeated addition only: x**y is x added to itself x**(y-1) times.
        power = increment = x
        for _ in range(1, y):
            for _ in range(1, x):
                power += increment
            increment = power
        return power

    @final
    def fibonacciRecursion(self, firstNumber=0, secondNumber=1, max=10, series=None):
        """
        Calculate and print -max numbers for fibonacci series. Use recursion.
            ex calculate fibonacciRecursion -firstNumber=0 -secondNumber=1 -max=10

        :param int firstNumber: Start number
        :param int secondNumber: Second number
        :param int max: Max numbers to print
        :param list series: Fibonacci series computed so far
        """
        if max < 2:
            raise ValueError("Parameter -max should be greater than 1")
        if not series:
            series = [firstNumber, secondNumber]
        max -= 1
        if max == 1:
            return _summary(series)
        following = firstNumber + secondNumber
        return self.fibonacciRecursion(secondNumber, following, max, series + [following])

    @final
    def fibonacciWithoutRecursion(self, firstNumber=1, secondNumber=1, max=10):
        """
        Calculate and print -max numbers for fibonacci series without recursion.
            ex calculate fibonacciWithoutRecursion -firstNumber=0 -secondNumber=1 -max=10

        :param int firstNumber: Start number
        :param int secondNumber: Second number
        :param int max: Max numbers to print
        """
        series = [firstNumber, secondNumber]
        for _ in range(2, max):
            series.append(series[-2] + series[-1])
        return _summary(series)

    def _helper(self):
        """Help text followed by the worked assignment, with live results."""
        assignment = "\n".join((
            "Assignment: ",
            "A: The sum of all natural numbers below 10 that are multiples of 3 or 5 are 23 (3 + 5 + 6 + 9):",
            "calculate multiplesSum -divisors=[3,5] -max=10",
            "Result:%s" % self.multiplesSum([3, 5], 10),
            "",
            "A Extra: Create a second algorithm to find the sum of all the multiples of 3 or 5 below 1000:",
            "calculate multiplesSumFormula -divisors=[3,5] -max=1000",
            "Result:%s" % self.multiplesSumFormula([3, 5], 1000),
            "",
            "A Extra: Create a second algorithm to find the sum of all the multiples of 3 or 4 below 1000:",
            "calculate multiplesSumFormula -divisors=[3,4] -max=1000",
            "Result:%s" % self.multiplesSumFormula([3, 4], 1000),
            "",
            "B: Calculate x^y:",
            "calculate power -x=2 -y=2",
            "Result:%s" % self.power(2, 2),
            "",
            "C: Fibonacci:",
            "calculate fibonacciRecursion -firstNumber=0 -secondNumber=1 -max=10",
            "Result:%s" % self.fibonacciRecursion(0, 1, 10),
            "",
            "C Extra:",
            "calculate fibonacciWithoutRecursion -firstNumber=0 -secondNumber=1 -max=10",
            "Result:%s" % self.fibonacciWithoutRecursion(0, 1, 10),
        ))
        return super()._helper() + self._colorize(assignment, Color.WARNING, True) + "\n"


def main():
    """Console entry point: configure logging, run the calculator, return the exit code."""
    logging.basicConfig(
        level=os.environ.get("DOCKET_LOGLEVEL", "WARNING").upper(),
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
    )
    return invoke(Calculator)


__all__ = (
    "Calculator",
    "main",
)

# Copyright (c) 2026 The Xaya developers
# Distributed under the MIT software license, see the accompanying
# file COPYING or http://www.opensource.org/licenses/mit-license.php.

"""
Rounding and formatting helpers shared by the aggregation steps.
"""

from datetime import datetime, timezone
from decimal import Decimal, ROUND_HALF_UP

# Go's time.RFC850 layout, always rendered in UTC.
RFC850 = "%A, %d-%b-%y %H:%M:%S UTC"


def toDecimal (value):
  """
  Converts an int, float or Decimal to Decimal.  Floats go through their
  shortest repr, so that 0.87345 becomes exactly Decimal ("0.87345").
  """

  if isinstance (value, Decimal):
    return value
  return Decimal (str (value))


def toFixed (value, divisor=1, places=2):
  """
  Returns value / divisor rounded to the given number of decimal places,
  with halves rounded away from zero.  The result is a float.
  """

  quantum = Decimal (1).scaleb (-places)
  res = toDecimal (value) / toDecimal (divisor)
  return float (res.quantize (quantum, rounding=ROUND_HALF_UP))


def percentage (value, total=1, places=2):
  """
  Expresses value / total as a percentage rounded like toFixed.
  """

  return toFixed (toDecimal (value) * 100, total, places)


def formatExpiration (timestamp):
  return datetime.fromtimestamp (timestamp, timezone.utc).strftime (RFC850)

# Copyright (c) 2026 The Xaya developers
# Distributed under the MIT software license, see the accompanying
# file COPYING or http://www.opensource.org/licenses/mit-license.php.

"""
Quorum and per-agenda vote progress for a vote version.
"""

from .node import FetchError
from .util import formatExpiration, percentage, toFixed

from types import MappingProxyType
import logging

# The node lists the abstain choice of every agenda first.  The separate
# abstained percentage is always read from this index.
ABSTAIN_CHOICE_INDEX = 0


class Agenda:
  """
  Vote progress of a single agenda, ready for display.
  """

  def __init__ (self, data, startHeight):
    self.id = data["id"]
    self.description = data.get ("description", "")
    self.status = data.get ("status", "")
    self.startHeight = startHeight

    choices = data.get ("choices") or []
    ids = [""] * len (choices)
    pcts = [0.0] * len (choices)
    for i, c in enumerate (choices):
      if not c.get ("isabstain", False):
        ids[i] = c["id"]
        pcts[i] = percentage (c["progress"])
    self.choiceIds = tuple (ids)
    self.choicePercentages = tuple (pcts)

    self.quorumVotedPercentage = percentage (data["quorumprogress"])
    if choices:
      abstain = choices[ABSTAIN_CHOICE_INDEX]["progress"]
    else:
      abstain = 0
    self.quorumAbstainedPercentage = percentage (abstain)
    try:
      self.quorumExpirationDate = formatExpiration (data["expiretime"])
    except (OverflowError, OSError) as exc:
      raise ValueError ("invalid expire time %r for agenda %s"
                          % (data["expiretime"], self.id)) from exc

  def toJson (self):
    return {
      "id": self.id,
      "description": self.description,
      "status": self.status,
      "startHeight": self.startHeight,
      "choiceIds": list (self.choiceIds),
      "choicePercentages": list (self.choicePercentages),
      "quorumVotedPercentage": self.quorumVotedPercentage,
      "quorumAbstainedPercentage": self.quorumAbstainedPercentage,
      "quorumExpirationDate": self.quorumExpirationDate,
    }


def lockedInPercentage (*, startHeight, endHeight, currentHeight):
  """
  Returns how much of the voting window is left, in percent.
  """

  windowSize = endHeight - startHeight
  if windowSize <= 0:
    return 0.0

  return toFixed ((endHeight - currentHeight) * 100, windowSize)


class QuorumEvaluator:
  """
  Computes quorum and agenda fields of the snapshot for the most popular
  stake version.
  """

  def __init__ (self, node):
    self.log = logging.getLogger ("upgradestatus.quorum")
    self.node = node

  def compute (self, stakeVersion, previous=None):
    """
    Evaluates the agendas of the given vote version and returns the
    resulting snapshot fields as dict.  If the vote info cannot be
    fetched, quorum is false and the agenda data is taken over from
    the previous snapshot (if any).
    """

    res = {
      "quorum": False,
      "lockedinPercentage": 0.0,
      "voteInfo": None,
      "agendas": (),
    }

    if stakeVersion == 0:
      self.log.info ("No upgrade vote version, skipping agendas")
      return res

    try:
      info = self.node.getAgendaInfo (stakeVersion)
    except FetchError as exc:
      self.log.warning ("Get vote info failed: %s" % exc)
      if previous is not None:
        res["lockedinPercentage"] = previous.lockedinPercentage
        res["voteInfo"] = previous.voteInfo
        res["agendas"] = previous.agendas
      return res

    try:
      agendas = info.get ("agendas") or []
      res["voteInfo"] = MappingProxyType ({
        "totalVotes": info["totalvotes"],
        "quorum": info["quorum"],
        "startHeight": info["startheight"],
        "endHeight": info["endheight"],
        "currentHeight": info["currentheight"],
        "voteVersion": stakeVersion,
      })

      if not agendas:
        self.log.info ("No agendas for vote version %d" % stakeVersion)
        return res

      res["quorum"] = info["totalvotes"] >= info["quorum"]
      res["lockedinPercentage"] = lockedInPercentage (
          startHeight=info["startheight"], endHeight=info["endheight"],
          currentHeight=info["currentheight"])
      res["agendas"] = tuple (Agenda (a, info["startheight"])
                              for a in agendas)
    except (KeyError, TypeError) as exc:
      raise ValueError ("malformed vote info: %s" % exc) from exc

    return res

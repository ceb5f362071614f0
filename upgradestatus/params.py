# Copyright (c) 2026 The Xaya developers
# Distributed under the MIT software license, see the accompanying
# file COPYING or http://www.opensource.org/licenses/mit-license.php.

"""
Network constants and the thresholds derived from them.
"""

from .util import toFixed


class ConfigError (Exception):
  """
  Raised when network parameters are unusable.  This is fatal at startup.
  """


class NetworkParams:
  """
  The consensus constants of one network that are relevant for
  tracking upgrade votes.
  """

  def __init__ (self, *, name, blockEnforceNumRequired, blockRejectNumRequired,
                blockUpgradeNumToCheck, stakeVersionInterval,
                stakeMajorityMultiplier, stakeMajorityDivisor,
                ruleChangeActivationQuorum, ruleChangeActivationInterval,
                ticketsPerBlock, stakeValidationHeight):
    self.name = name
    self.blockEnforceNumRequired = blockEnforceNumRequired
    self.blockRejectNumRequired = blockRejectNumRequired
    self.blockUpgradeNumToCheck = blockUpgradeNumToCheck
    self.stakeVersionInterval = stakeVersionInterval
    self.stakeMajorityMultiplier = stakeMajorityMultiplier
    self.stakeMajorityDivisor = stakeMajorityDivisor
    self.ruleChangeActivationQuorum = ruleChangeActivationQuorum
    self.ruleChangeActivationInterval = ruleChangeActivationInterval
    self.ticketsPerBlock = ticketsPerBlock
    self.stakeValidationHeight = stakeValidationHeight


MAINNET = NetworkParams (
  name="mainnet",
  blockEnforceNumRequired=750,
  blockRejectNumRequired=950,
  blockUpgradeNumToCheck=1000,
  stakeVersionInterval=144 * 2 * 7,
  stakeMajorityMultiplier=3,
  stakeMajorityDivisor=4,
  ruleChangeActivationQuorum=4032,
  ruleChangeActivationInterval=2016 * 4,
  ticketsPerBlock=5,
  stakeValidationHeight=4096,
)

TESTNET = NetworkParams (
  name="testnet",
  blockEnforceNumRequired=51,
  blockRejectNumRequired=75,
  blockUpgradeNumToCheck=100,
  stakeVersionInterval=144 * 2 * 7,
  stakeMajorityMultiplier=3,
  stakeMajorityDivisor=4,
  ruleChangeActivationQuorum=2520,
  ruleChangeActivationInterval=5040,
  ticketsPerBlock=5,
  stakeValidationHeight=768,
)

SIMNET = NetworkParams (
  name="simnet",
  blockEnforceNumRequired=51,
  blockRejectNumRequired=75,
  blockUpgradeNumToCheck=100,
  stakeVersionInterval=8 * 2 * 7,
  stakeMajorityMultiplier=3,
  stakeMajorityDivisor=4,
  ruleChangeActivationQuorum=160,
  ruleChangeActivationInterval=320,
  ticketsPerBlock=5,
  stakeValidationHeight=16 + 64 * 2,
)

NETWORKS = {p.name: p for p in [MAINNET, TESTNET, SIMNET]}


def getNetwork (name):
  """
  Looks up the parameters for a network by name.
  """

  if name not in NETWORKS:
    raise ConfigError ("unknown network: %s" % name)
  return NETWORKS[name]


class ThresholdConfig:
  """
  Static thresholds derived once from the network parameters.  Instances
  are not modified after construction.
  """

  def __init__ (self, params):
    for field in ["blockUpgradeNumToCheck", "stakeVersionInterval",
                  "ticketsPerBlock", "stakeMajorityDivisor",
                  "ruleChangeActivationInterval"]:
      if getattr (params, field) <= 0:
        raise ConfigError ("%s must be positive for network %s"
                            % (field, params.name))

    self.network = params.name

    self.blockVersionWindowLength = params.blockUpgradeNumToCheck
    self.blockEnforceNumRequired = params.blockEnforceNumRequired
    self.blockRejectNumRequired = params.blockRejectNumRequired
    self.blockVersionEnforceThreshold \
        = params.blockEnforceNumRequired * 100 // params.blockUpgradeNumToCheck
    self.blockVersionRejectThreshold \
        = params.blockRejectNumRequired * 100 // params.blockUpgradeNumToCheck

    self.stakeVersionWindowLength = params.stakeVersionInterval
    self.stakeMajorityMultiplier = params.stakeMajorityMultiplier
    self.stakeMajorityDivisor = params.stakeMajorityDivisor
    self.stakeVersionThreshold = toFixed (params.stakeMajorityMultiplier * 100,
                                          params.stakeMajorityDivisor, 0)
    self.stakeValidationHeight = params.stakeValidationHeight
    self.ticketsPerBlock = params.ticketsPerBlock

    self.ruleChangeActivationQuorum = params.ruleChangeActivationQuorum
    self.quorumThreshold \
        = params.ruleChangeActivationQuorum * 100 \
            / (params.ruleChangeActivationInterval * params.ticketsPerBlock)

  def toJson (self):
    return {
      "network": self.network,
      "blockVersionEnforceThreshold": self.blockVersionEnforceThreshold,
      "blockVersionRejectThreshold": self.blockVersionRejectThreshold,
      "blockVersionWindowLength": self.blockVersionWindowLength,
      "stakeVersionWindowLength": self.stakeVersionWindowLength,
      "stakeVersionThreshold": self.stakeVersionThreshold,
      "ruleChangeActivationQuorum": self.ruleChangeActivationQuorum,
      "quorumThreshold": self.quorumThreshold,
    }

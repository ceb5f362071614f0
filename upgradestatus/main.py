#!/usr/bin/env python3

# Copyright (c) 2026 The Xaya developers
# Distributed under the MIT software license, see the accompanying
# file COPYING or http://www.opensource.org/licenses/mit-license.php.

"""
Entry point:  Connects to the node, keeps the status snapshot up to date
on every new block and serves it over HTTP.
"""

from .aggregator import StatusAggregator
from .node import NodeClient
from .params import ConfigError, NETWORKS, ThresholdConfig, getNetwork
from .server import createApp
from .worker import BlockNotifier, TriggerQueue, UpdateWorker

import uvicorn
import zmq

import argparse
import logging
import sys


def parseArgs (argv=None):
  parser = argparse.ArgumentParser (
      description="Track block and stake version upgrade votes")
  parser.add_argument ("--rpc_url", required=True,
                       help="JSON-RPC URL for the node, including credentials")
  parser.add_argument ("--rpc_cert", default=None,
                       help="TLS certificate of the node (e.g. dcrd's rpc.cert)")
  parser.add_argument ("--zmq_address", default=None,
                       help="ZMQ address for hashblock notifications; only"
                            " for nodes that publish them (not dcrd)")
  parser.add_argument ("--network", default="mainnet",
                       choices=sorted (NETWORKS.keys ()),
                       help="Network the node is running on")
  parser.add_argument ("--poll_interval", type=int, default=30,
                       help="Seconds after which to update without a new block;"
                            " 0 disables polling (requires --zmq_address)")
  parser.add_argument ("--queue_size", type=int, default=100,
                       help="Maximum number of pending block notifications")
  parser.add_argument ("--listen_host", default="127.0.0.1",
                       help="Host for the HTTP server")
  parser.add_argument ("--listen_port", type=int, default=8000,
                       help="Port for the HTTP server")
  parser.add_argument ("--verbose", action="store_true",
                       help="Enable debug logging")
  return parser.parse_args (argv)


def main (argv=None):
  args = parseArgs (argv)

  level = logging.DEBUG if args.verbose else logging.INFO
  logging.basicConfig (level=level, stream=sys.stderr)
  log = logging.getLogger ("upgradestatus")

  try:
    config = ThresholdConfig (getNetwork (args.network))
  except ConfigError as exc:
    log.error ("Invalid configuration: %s" % exc)
    return 1
  if args.queue_size <= 0:
    log.error ("Invalid configuration: --queue_size must be positive")
    return 1

  pollInterval = args.poll_interval if args.poll_interval > 0 else None
  if pollInterval is None and args.zmq_address is None:
    log.error ("Invalid configuration: without --zmq_address,"
               " --poll_interval must be positive")
    return 1

  try:
    node = NodeClient.fromUrl (args.rpc_url, args.rpc_cert)
  except OSError as exc:
    log.error ("Failed to read node certificate %s: %s" % (args.rpc_cert, exc))
    return 1

  aggregator = StatusAggregator (node, config)
  triggers = TriggerQueue (args.queue_size)

  worker = UpdateWorker (aggregator, triggers, pollInterval)
  notifier = None
  ctx = None
  if args.zmq_address is not None:
    ctx = zmq.Context ()
    notifier = BlockNotifier (ctx, args.zmq_address, triggers)
  else:
    log.info ("No ZMQ address given, polling every %d seconds" % pollInterval)

  worker.start ()
  if notifier is not None:
    notifier.start ()

  try:
    # This blocks until SIGINT / SIGTERM.
    uvicorn.run (createApp (aggregator.holder),
                 host=args.listen_host, port=args.listen_port)
  finally:
    log.info ("Shutting down")
    if notifier is not None:
      notifier.stop ()
      notifier.join ()
    worker.stop ()
    worker.join ()
    if ctx is not None:
      ctx.term ()

  return 0


if __name__ == "__main__":
  sys.exit (main ())

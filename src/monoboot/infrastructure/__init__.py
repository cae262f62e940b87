"""Infrastructure layer: package graph, repository scanning, npm client.

This layer depends on the domain models plus stdlib and third-party libs
(NetworkX). It must never import from services, commands, or output.
"""

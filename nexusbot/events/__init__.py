"""
Bundled event modules: each binds ``handle`` to the event named by ``event``
"""

"""
Chat app for customer/realtor conversations about property listings.

Modules:
    models: Thread and Message
    session: ChatSession passed to every chat operation
    services: ThreadService and MessageService (the chat data accessor)
    realtime: Change-feed publishing and MessageFeedBridge
    panel: ChatPanel view state and message routing
    consumers: ChatPanelConsumer WebSocket endpoint
    views: REST API
"""

"""
INFRASTRUCTURE LAYER - Adapters for the domain ports

persistence/  Prisma: messages table and the three directory tables
realtime/     Redis pub/sub change feed
cache/        Redis client factory and conversation snapshot cache
"""

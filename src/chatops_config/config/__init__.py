"""
chatops-config: typed configuration tree and YAML loader.

The engine validates ``Config`` trees; ``load_config`` builds one from YAML
documents but never validates it.
"""

from chatops_config.config.loader import (
    config_from_mapping,
    load_config,
    load_yaml_file,
    merge_documents,
)
from chatops_config.config.models import (
    Action,
    ActionBindings,
    Alias,
    BotBindings,
    ChannelBindingsByID,
    ChannelBindingsByName,
    ChannelNotification,
    CloudSlack,
    Communications,
    Config,
    Discord,
    Elasticsearch,
    ElasticsearchIndex,
    Executors,
    GroupPolicySubject,
    GroupStaticSubject,
    Identifiable,
    Mattermost,
    PluginConfig,
    PluginContext,
    PluginKey,
    PluginProvider,
    PolicySubjectType,
    RBACPolicy,
    RegexConstraints,
    Settings,
    SinkBindings,
    Slack,
    SocketSlack,
    Sources,
    UserPolicySubject,
    UserStaticSubject,
    Webhook,
    decompose_plugin_key,
    executor_name_for_key,
)

__all__ = [
    "Action",
    "ActionBindings",
    "Alias",
    "BotBindings",
    "ChannelBindingsByID",
    "ChannelBindingsByName",
    "ChannelNotification",
    "CloudSlack",
    "Communications",
    "Config",
    "Discord",
    "Elasticsearch",
    "ElasticsearchIndex",
    "Executors",
    "GroupPolicySubject",
    "GroupStaticSubject",
    "Identifiable",
    "Mattermost",
    "PluginConfig",
    "PluginContext",
    "PluginKey",
    "PluginProvider",
    "PolicySubjectType",
    "RBACPolicy",
    "RegexConstraints",
    "Settings",
    "SinkBindings",
    "Slack",
    "SocketSlack",
    "Sources",
    "UserPolicySubject",
    "UserStaticSubject",
    "Webhook",
    "config_from_mapping",
    "decompose_plugin_key",
    "executor_name_for_key",
    "load_config",
    "load_yaml_file",
    "merge_documents",
]

"""Dependency Injection Container.

This module provides a centralized DI container using dependency-injector.
Lifecycles:
- Singleton: One instance per process (clients, configs, the gateway)
- Factory: New instance every time (pipelines and generators)

Usage:
    from easynews.core.container import container

    pipeline = container.news_pipeline()
    output, stats = await pipeline.run()

    # In tests
    with container.infrastructure.llm_client.override(mock_llm):
        ...
"""

from dependency_injector import containers, providers

from easynews.core.config import Config, get_config
from easynews.core.config_loader import load_pipeline_config


class InfrastructureContainer(containers.DeclarativeContainer):
    """Infrastructure layer dependencies (external clients).

    These are Singleton: one connection pool and one LLM client per run.
    """

    global_config = providers.Dependency(instance_of=Config)

    # ============================================
    # HTTP Client
    # ============================================

    http_client = providers.Singleton(
        "easynews.infrastructure.http_client.HTTPClient",
    )

    # ============================================
    # LLM
    # ============================================

    # Unified LLM client (LiteLLM-based, provider-agnostic)
    llm_client = providers.Singleton(
        "easynews.infrastructure.llm.LLMClient",
    )

    prompt_manager = providers.Singleton(
        "easynews.prompts.manager.PromptManager",
    )


class ConfigContainer(containers.DeclarativeContainer):
    """Configuration models container.

    The pipeline config is loaded from config/*.yaml once and reused;
    main() overrides it when another config directory is given.
    """

    pipeline_config = providers.Singleton(load_pipeline_config)

    allocation_config = providers.Singleton(
        lambda cfg: cfg.allocation,
        cfg=pipeline_config,
    )

    digest_config = providers.Singleton(
        lambda cfg: cfg.digest,
        cfg=pipeline_config,
    )


class ServiceContainer(containers.DeclarativeContainer):
    """Service layer dependencies.

    Services receive infrastructure dependencies via injection.
    """

    global_config = providers.Dependency(instance_of=Config)
    infrastructure = providers.DependenciesContainer()
    configs = providers.DependenciesContainer()

    # ============================================
    # Collector Services
    # ============================================

    classifier_gateway = providers.Singleton(
        "easynews.services.collector.classifier.ClassifierGateway",
        llm_client=infrastructure.llm_client,
        prompt_manager=infrastructure.prompt_manager,
    )

    heuristic_classifier = providers.Singleton(
        "easynews.services.collector.classifier.HeuristicClassifier",
    )

    category_allocator = providers.Factory(
        "easynews.services.collector.allocator.CategoryAllocator",
        gateway=classifier_gateway,
        config=configs.allocation_config,
        heuristic=heuristic_classifier,
    )

    # ============================================
    # Visual Services
    # ============================================

    image_fetcher = providers.Factory(
        "easynews.services.visual.pexels.CategoryImageFetcher",
        http_client=infrastructure.http_client,
        api_key=global_config.provided.pexels_api_key,
    )

    news_pipeline = providers.Factory(
        "easynews.services.collector.pipeline.NewsPipeline",
        http_client=infrastructure.http_client,
        gateway=classifier_gateway,
        allocator=category_allocator,
        image_fetcher=image_fetcher,
        config=configs.pipeline_config,
        concurrency=global_config.provided.classification_concurrency,
    )

    # ============================================
    # Digest Services
    # ============================================

    serious_digest_generator = providers.Factory(
        "easynews.services.digest.serious.SeriousDigestGenerator",
        llm_client=infrastructure.llm_client,
        prompt_manager=infrastructure.prompt_manager,
        config=configs.digest_config,
    )

    lifestyle_digest_generator = providers.Factory(
        "easynews.services.digest.lifestyle.LifestyleDigestGenerator",
        llm_client=infrastructure.llm_client,
        prompt_manager=infrastructure.prompt_manager,
        config=configs.digest_config,
    )


class ApplicationContainer(containers.DeclarativeContainer):
    """Root application container.

    Composes all sub-containers and provides the main entry point.
    """

    # Global Config singleton (environment variables)
    # Uses get_config() to ensure same instance across the app
    config = providers.Singleton(get_config)

    # Sub-containers
    infrastructure = providers.Container(
        InfrastructureContainer,
        global_config=config,
    )

    configs = providers.Container(
        ConfigContainer,
    )

    services = providers.Container(
        ServiceContainer,
        global_config=config,
        infrastructure=infrastructure,
        configs=configs,
    )

    # ============================================
    # Convenience accessors (shortcuts)
    # ============================================

    http_client = providers.Singleton(
        lambda client: client,
        client=infrastructure.http_client,
    )

    news_pipeline = providers.Factory(
        lambda svc: svc,
        svc=services.news_pipeline,
    )

    serious_digest_generator = providers.Factory(
        lambda svc: svc,
        svc=services.serious_digest_generator,
    )

    lifestyle_digest_generator = providers.Factory(
        lambda svc: svc,
        svc=services.lifestyle_digest_generator,
    )


def create_container() -> ApplicationContainer:
    """Create and configure the application container.

    Returns:
        Configured ApplicationContainer instance
    """
    return ApplicationContainer()


# Global container instance
container = create_container()


def override_pipeline_config(config_dir: str):
    """Context manager loading the pipeline config from another directory.

    Usage:
        with override_pipeline_config("/etc/easynews"):
            pipeline = container.news_pipeline()
    """
    return container.configs.pipeline_config.override(
        providers.Singleton(load_pipeline_config, config_dir)
    )


__all__ = [
    "ApplicationContainer",
    "ConfigContainer",
    "InfrastructureContainer",
    "ServiceContainer",
    "container",
    "create_container",
    "override_pipeline_config",
]
